"""Loading of the JSON configuration and usage ledger files."""

import logging
from pathlib import Path

import orjson

from codex_usage_monitor.types import (
    AppConfig,
    CodexImportConfig,
    ModelPricing,
    UsageData,
    UsageEntry,
)
from codex_usage_monitor.types.config import DEFAULT_CODEX_MODEL

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "codex-usage-monitor"


def default_config_file() -> Path:
    return CONFIG_DIR / "config.json"


def default_data_file() -> Path:
    return CONFIG_DIR / "usage.json"


def load_config(path: str | Path) -> AppConfig:
    """Load the application config, or defaults when the file is absent.

    Raises OSError if the file cannot be read and ValueError if it is not
    valid JSON or a value has the wrong type.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Config file not found, using defaults: %s", path)
        return AppConfig()

    raw = _read_json_object(path)
    return AppConfig(
        api_keys=_parse_api_keys(raw.get("api_keys", {})),
        pricing=_parse_pricing(raw.get("pricing", {})),
        codex_import=_parse_codex_import(raw.get("codex_import", {})),
    )


def load_usage_data(path: str | Path) -> UsageData:
    """Load the usage ledger, or an empty ledger when the file is absent."""
    path = Path(path)
    if not path.exists():
        logger.debug("Usage data file not found, starting empty: %s", path)
        return UsageData()

    raw = _read_json_object(path)
    budget = raw.get("budget_usd")
    if budget is not None and not _is_number(budget):
        raise ValueError(f"budget_usd must be a number, got {budget!r}")
    entries = raw.get("entries", [])
    if not isinstance(entries, list):
        raise ValueError("entries must be a list")
    return UsageData(
        budget_usd=float(budget) if budget is not None else None,
        entries=[_parse_entry(i, e) for i, e in enumerate(entries)],
    )


def _read_json_object(path: Path) -> dict:
    with open(path, "rb") as f:
        raw = orjson.loads(f.read())
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return raw


def _parse_api_keys(raw) -> dict[str, str]:
    if not isinstance(raw, dict) or not all(isinstance(v, str) for v in raw.values()):
        raise ValueError("api_keys must map provider names to strings")
    return dict(raw)


def _parse_pricing(raw) -> dict[str, ModelPricing]:
    if not isinstance(raw, dict):
        raise ValueError("pricing must be an object")
    pricing = {}
    for key, value in raw.items():
        if not isinstance(value, dict):
            raise ValueError(f"pricing[{key!r}] must be an object")
        input_price = value.get("input_per_million_usd")
        output_price = value.get("output_per_million_usd")
        if not _is_number(input_price) or not _is_number(output_price):
            raise ValueError(f"pricing[{key!r}] needs numeric input/output prices")
        pricing[key] = ModelPricing(float(input_price), float(output_price))
    return pricing


def _parse_codex_import(raw) -> CodexImportConfig:
    if not isinstance(raw, dict):
        raise ValueError("codex_import must be an object")
    enabled = raw.get("enabled", True)
    sessions_dir = raw.get("sessions_dir")
    model = raw.get("model", DEFAULT_CODEX_MODEL)
    if not isinstance(enabled, bool):
        raise ValueError("codex_import.enabled must be a boolean")
    if sessions_dir is not None and not isinstance(sessions_dir, str):
        raise ValueError("codex_import.sessions_dir must be a string")
    if not isinstance(model, str):
        raise ValueError("codex_import.model must be a string")
    return CodexImportConfig(enabled=enabled, sessions_dir=sessions_dir, model=model)


def _parse_entry(index: int, raw) -> UsageEntry:
    if not isinstance(raw, dict):
        raise ValueError(f"entries[{index}] must be an object")
    for key in ("timestamp", "provider", "model"):
        if not isinstance(raw.get(key), str):
            raise ValueError(f"entries[{index}].{key} must be a string")
    for key in ("input_tokens", "output_tokens"):
        value = raw.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError(f"entries[{index}].{key} must be a non-negative integer")
    if not _is_number(raw.get("cost_usd")):
        raise ValueError(f"entries[{index}].cost_usd must be a number")
    return UsageEntry(
        timestamp=raw["timestamp"],
        provider=raw["provider"],
        model=raw["model"],
        input_tokens=raw["input_tokens"],
        output_tokens=raw["output_tokens"],
        cost_usd=float(raw["cost_usd"]),
    )


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
