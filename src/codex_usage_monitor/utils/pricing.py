"""Cost estimation from the configured pricing table."""

from codex_usage_monitor.types import ModelPricing


def lookup_pricing(
    pricing: dict[str, ModelPricing],
    provider: str,
    model: str,
) -> ModelPricing | None:
    """Match ``provider/model`` exactly, falling back to ``provider/*``."""
    exact = pricing.get(f"{provider}/{model}")
    if exact is not None:
        return exact
    return pricing.get(f"{provider}/*")


def estimate_cost_usd(
    provider: str,
    model: str,
    input_tokens: int,
    output_tokens: int,
    pricing: dict[str, ModelPricing],
) -> float:
    """Calculate cost in USD for the given token counts and model."""
    model_pricing = lookup_pricing(pricing, provider, model)
    if model_pricing is None:
        return 0.0
    return (
        input_tokens * model_pricing.input_per_million_usd
        + output_tokens * model_pricing.output_per_million_usd
    ) / 1_000_000
