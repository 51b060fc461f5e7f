"""Application configuration types."""

from dataclasses import dataclass, field

from codex_usage_monitor.types.usage import ModelPricing

DEFAULT_CODEX_MODEL = "codex-cli"


def default_pricing() -> dict[str, ModelPricing]:
    return {
        "openai/gpt-4.1-mini": ModelPricing(0.40, 1.60),
        "anthropic/claude-3.7-sonnet": ModelPricing(3.00, 15.00),
        "gemini/gemini-2.0-flash": ModelPricing(0.35, 1.05),
    }


@dataclass
class CodexImportConfig:
    enabled: bool = True
    sessions_dir: str | None = None   # None -> $CODEX_HOME/sessions
    model: str = DEFAULT_CODEX_MODEL


@dataclass
class AppConfig:
    api_keys: dict[str, str] = field(default_factory=dict)
    pricing: dict[str, ModelPricing] = field(default_factory=default_pricing)
    codex_import: CodexImportConfig = field(default_factory=CodexImportConfig)
