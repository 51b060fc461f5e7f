"""In-memory cache of parsed Codex sessions plus adaptive discovery state."""

import logging
import time
from pathlib import Path

from codex_usage_monitor.types.codex import (
    CachedSession,
    DISCOVERY_BACKOFF_STEP_S,
    ImportDiagnostics,
    MAX_DISCOVERY_INTERVAL_S,
    MIN_DISCOVERY_INTERVAL_S,
    SessionFingerprint,
)

logger = logging.getLogger(__name__)

# Idle discovery cycles before the interval grows by one step
IDLE_CYCLES_BEFORE_BACKOFF = 3


class CodexImportCache:
    """Caches session facts to avoid re-parsing unchanged session logs.

    One instance is owned by whoever drives the merge cycle and is passed
    explicitly to every call; it is not safe to share between concurrent
    merges.
    """

    def __init__(self):
        self.sessions: dict[Path, CachedSession] = {}
        self.session_files: list[Path] = []
        self.last_discovery_at: float | None = None
        self.discovery_interval: float = MIN_DISCOVERY_INTERVAL_S
        self.idle_discovery_cycles = 0
        self.diagnostics = ImportDiagnostics()

    def get(self, path: Path) -> CachedSession | None:
        return self.sessions.get(path)

    def put(self, path: Path, session: CachedSession):
        self.sessions[path] = session

    def remove(self, path: Path):
        self.sessions.pop(path, None)

    def is_stale(self, path: Path, fingerprint: SessionFingerprint) -> bool:
        cached = self.sessions.get(path)
        if cached is None:
            return True
        return cached.fingerprint != fingerprint

    def retain(self, active: set[Path]):
        """Drop sessions and known files that are no longer on disk."""
        self.sessions = {p: s for p, s in self.sessions.items() if p in active}
        self.session_files = [p for p in self.session_files if p in active]

    # ------------------------------------------------------------------
    # Discovery scheduling
    # ------------------------------------------------------------------

    def should_refresh_discovery(self, now: float | None = None) -> bool:
        """Return True when a directory walk is due this cycle."""
        if self.last_discovery_at is None:
            return True
        if now is None:
            now = time.time()
        elapsed = now - self.last_discovery_at
        if elapsed < 0:
            # Clock went backwards
            return True
        return elapsed >= self.discovery_interval

    def tune_discovery_interval(self, changes_detected: bool):
        """Reset the interval on change, otherwise back off after idle cycles."""
        if changes_detected:
            if self.discovery_interval != MIN_DISCOVERY_INTERVAL_S:
                logger.info("Session changes detected, discovery interval reset to %.0fs",
                            MIN_DISCOVERY_INTERVAL_S)
            self.discovery_interval = MIN_DISCOVERY_INTERVAL_S
            self.idle_discovery_cycles = 0
            return

        self.idle_discovery_cycles += 1
        if self.idle_discovery_cycles < IDLE_CYCLES_BEFORE_BACKOFF:
            return

        self.idle_discovery_cycles = 0
        grown = min(self.discovery_interval + DISCOVERY_BACKOFF_STEP_S, MAX_DISCOVERY_INTERVAL_S)
        if grown != self.discovery_interval:
            logger.info("Sessions idle, discovery interval grown to %.0fs", grown)
        self.discovery_interval = grown
