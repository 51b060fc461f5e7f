"""Usage ledger types."""

from dataclasses import dataclass, field


@dataclass
class UsageEntry:
    timestamp: str
    provider: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class UsageData:
    budget_usd: float | None = None
    entries: list[UsageEntry] = field(default_factory=list)


@dataclass
class ModelPricing:
    input_per_million_usd: float
    output_per_million_usd: float
