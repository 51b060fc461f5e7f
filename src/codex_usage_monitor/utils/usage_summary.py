"""Per-provider aggregation of the usage ledger."""

from dataclasses import dataclass

from codex_usage_monitor.types import UsageData


@dataclass
class ProviderSummary:
    provider: str
    total_tokens: int = 0
    total_cost_usd: float = 0.0


@dataclass
class ProviderStats:
    provider: str
    total_tokens: int = 0
    total_cost_usd: float = 0.0
    requests: int = 0


def provider_summaries(data: UsageData) -> list[ProviderSummary]:
    """Group ledger records by provider, most expensive first.

    Ties on cost are broken by token count (descending), then provider name.
    """
    grouped: dict[str, ProviderSummary] = {}
    for entry in data.entries:
        summary = grouped.setdefault(entry.provider, ProviderSummary(entry.provider))
        summary.total_tokens += entry.total_tokens
        summary.total_cost_usd += entry.cost_usd

    return sorted(
        grouped.values(),
        key=lambda s: (-s.total_cost_usd, -s.total_tokens, s.provider),
    )


def provider_stats(data: UsageData, provider: str) -> ProviderStats | None:
    if not provider:
        return None

    stats = ProviderStats(provider)
    for entry in data.entries:
        if entry.provider != provider:
            continue
        stats.total_tokens += entry.total_tokens
        stats.total_cost_usd += entry.cost_usd
        stats.requests += 1

    if stats.requests == 0:
        return None
    return stats
