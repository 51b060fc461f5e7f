"""Tests for codex_usage_monitor.services.import_cache."""

from pathlib import Path

import pytest

from codex_usage_monitor.services.import_cache import CodexImportCache
from codex_usage_monitor.types import CachedSession, SessionFacts, SessionFingerprint
from codex_usage_monitor.types.codex import (
    DISCOVERY_BACKOFF_STEP_S,
    MAX_DISCOVERY_INTERVAL_S,
    MIN_DISCOVERY_INTERVAL_S,
)


def _session(modified_ns=100, file_len=10) -> CachedSession:
    return CachedSession(
        fingerprint=SessionFingerprint(modified_ns=modified_ns, file_len=file_len),
        facts=SessionFacts(timestamp="2026-02-18T00:00:00Z", input_tokens=1, output_tokens=2,
                           has_token_usage=True),
    )


class TestCacheEntries:
    def test_get_nonexistent(self, cache):
        assert cache.get(Path("missing.jsonl")) is None

    def test_put_and_get(self, cache):
        cache.put(Path("a.jsonl"), _session())
        assert cache.get(Path("a.jsonl")).input_tokens == 1

    def test_remove_missing_is_noop(self, cache):
        cache.remove(Path("never.jsonl"))
        assert cache.sessions == {}

    def test_retain_prunes_sessions_and_files(self, cache):
        a, b = Path("a.jsonl"), Path("b.jsonl")
        cache.put(a, _session())
        cache.put(b, _session())
        cache.session_files = [a, b]
        cache.retain({b})
        assert list(cache.sessions) == [b]
        assert cache.session_files == [b]


class TestStaleness:
    def test_not_cached_is_stale(self, cache):
        assert cache.is_stale(Path("x.jsonl"), SessionFingerprint(1, 1)) is True

    def test_matching_fingerprint_is_fresh(self, cache):
        cache.put(Path("x.jsonl"), _session(modified_ns=5, file_len=9))
        assert cache.is_stale(Path("x.jsonl"), SessionFingerprint(5, 9)) is False

    def test_mtime_change_is_stale(self, cache):
        cache.put(Path("x.jsonl"), _session(modified_ns=5, file_len=9))
        assert cache.is_stale(Path("x.jsonl"), SessionFingerprint(6, 9)) is True

    def test_size_change_is_stale(self, cache):
        cache.put(Path("x.jsonl"), _session(modified_ns=5, file_len=9))
        assert cache.is_stale(Path("x.jsonl"), SessionFingerprint(5, 10)) is True


class TestDiscoverySchedule:
    def test_first_cycle_is_due(self, cache):
        assert cache.should_refresh_discovery(now=1000.0) is True

    def test_not_due_within_interval(self, cache):
        cache.last_discovery_at = 1000.0
        assert cache.should_refresh_discovery(now=1000.0 + MIN_DISCOVERY_INTERVAL_S - 1) is False

    def test_due_at_interval(self, cache):
        cache.last_discovery_at = 1000.0
        assert cache.should_refresh_discovery(now=1000.0 + MIN_DISCOVERY_INTERVAL_S) is True

    def test_due_when_clock_goes_backwards(self, cache):
        cache.last_discovery_at = 1000.0
        assert cache.should_refresh_discovery(now=900.0) is True

    def test_uses_current_interval(self, cache):
        cache.last_discovery_at = 1000.0
        cache.discovery_interval = 60.0
        assert cache.should_refresh_discovery(now=1030.0) is False
        assert cache.should_refresh_discovery(now=1060.0) is True


class TestIntervalTuning:
    def test_three_idle_cycles_grow_by_one_step(self, cache):
        cache.tune_discovery_interval(False)
        cache.tune_discovery_interval(False)
        assert cache.discovery_interval == MIN_DISCOVERY_INTERVAL_S
        cache.tune_discovery_interval(False)
        assert cache.discovery_interval == MIN_DISCOVERY_INTERVAL_S + DISCOVERY_BACKOFF_STEP_S
        assert cache.idle_discovery_cycles == 0

    def test_change_resets_interval_and_idle_count(self, cache):
        cache.discovery_interval = 50.0
        cache.idle_discovery_cycles = 2
        cache.tune_discovery_interval(True)
        assert cache.discovery_interval == MIN_DISCOVERY_INTERVAL_S
        assert cache.idle_discovery_cycles == 0

    def test_change_clears_partial_idle_streak(self, cache):
        cache.tune_discovery_interval(False)
        cache.tune_discovery_interval(False)
        cache.tune_discovery_interval(True)
        cache.tune_discovery_interval(False)
        assert cache.discovery_interval == MIN_DISCOVERY_INTERVAL_S
        assert cache.idle_discovery_cycles == 1

    @pytest.mark.parametrize("idle_cycles", [33, 60, 300])
    def test_growth_is_clamped_at_maximum(self, cache, idle_cycles):
        for _ in range(idle_cycles):
            cache.tune_discovery_interval(False)
            assert cache.discovery_interval <= MAX_DISCOVERY_INTERVAL_S
        assert cache.discovery_interval == MAX_DISCOVERY_INTERVAL_S
