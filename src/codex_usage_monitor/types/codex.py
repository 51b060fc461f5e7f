"""Types for Codex session import: fingerprints, rate limits, parse outcomes."""

from dataclasses import dataclass
from typing import Optional, Union

MIN_DISCOVERY_INTERVAL_S = 10.0
MAX_DISCOVERY_INTERVAL_S = 120.0
DISCOVERY_BACKOFF_STEP_S = 10.0


@dataclass(frozen=True)
class SessionFingerprint:
    """(mtime, size) of a session file, used as a cheap change detector."""
    modified_ns: int
    file_len: int


@dataclass(frozen=True)
class RateLimit:
    used_percent: float
    window_minutes: int
    resets_at: Optional[int] = None   # epoch seconds


@dataclass(frozen=True)
class RateLimitSnapshot:
    timestamp: str
    primary: Optional[RateLimit] = None
    secondary: Optional[RateLimit] = None


@dataclass(frozen=True)
class SessionFacts:
    """Usage and rate-limit facts extracted from one session log."""
    timestamp: str
    input_tokens: int = 0
    output_tokens: int = 0
    has_token_usage: bool = False
    limits: Optional[RateLimitSnapshot] = None


@dataclass(frozen=True)
class CachedSession:
    fingerprint: SessionFingerprint
    facts: SessionFacts

    @property
    def timestamp(self) -> str:
        return self.facts.timestamp

    @property
    def input_tokens(self) -> int:
        return self.facts.input_tokens

    @property
    def output_tokens(self) -> int:
        return self.facts.output_tokens

    @property
    def has_token_usage(self) -> bool:
        return self.facts.has_token_usage

    @property
    def limits(self) -> Optional[RateLimitSnapshot]:
        return self.facts.limits


@dataclass(frozen=True)
class ImportDiagnostics:
    active_files: int = 0
    refreshed_files: int = 0
    parse_error_files: int = 0
    no_usage_or_limits_files: int = 0
    unreadable_files: int = 0
    last_import_at: Optional[float] = None   # epoch seconds
    discovery_interval: float = MIN_DISCOVERY_INTERVAL_S


# Parse outcomes. Contents-level parsing yields ParsedContents, NoUsageOrLimits
# or ParseError; file-level parsing adds Unreadable and wraps facts in Parsed.

@dataclass(frozen=True)
class ParsedContents:
    facts: SessionFacts


@dataclass(frozen=True)
class Parsed:
    session: CachedSession


@dataclass(frozen=True)
class NoUsageOrLimits:
    pass


@dataclass(frozen=True)
class ParseError:
    pass


@dataclass(frozen=True)
class Unreadable:
    reason: str = ""


ContentsOutcome = Union[ParsedContents, NoUsageOrLimits, ParseError]
FileOutcome = Union[Parsed, NoUsageOrLimits, ParseError, Unreadable]
