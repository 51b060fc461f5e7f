"""Type definitions for Codex Usage Monitor."""

from codex_usage_monitor.types.usage import UsageEntry, UsageData, ModelPricing
from codex_usage_monitor.types.config import AppConfig, CodexImportConfig
from codex_usage_monitor.types.codex import (
    SessionFingerprint,
    RateLimit,
    RateLimitSnapshot,
    SessionFacts,
    CachedSession,
    ImportDiagnostics,
    ParsedContents,
    Parsed,
    NoUsageOrLimits,
    ParseError,
    Unreadable,
)

__all__ = [
    "UsageEntry",
    "UsageData",
    "ModelPricing",
    "AppConfig",
    "CodexImportConfig",
    "SessionFingerprint",
    "RateLimit",
    "RateLimitSnapshot",
    "SessionFacts",
    "CachedSession",
    "ImportDiagnostics",
    "ParsedContents",
    "Parsed",
    "NoUsageOrLimits",
    "ParseError",
    "Unreadable",
]
