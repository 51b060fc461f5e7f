"""Merge Codex session usage into the shared usage ledger.

One call to :func:`merge_codex_usage` is one merge cycle: an optional
directory walk, a fingerprint sweep that re-parses only new or changed
session logs, cache pruning, ledger merge and a fresh diagnostics snapshot.
"""

import logging
import os
import time
from pathlib import Path

from codex_usage_monitor.services.import_cache import CodexImportCache
from codex_usage_monitor.services.session_discovery import collect_session_files, sessions_root
from codex_usage_monitor.services.session_parser import parse_session_file
from codex_usage_monitor.types import (
    AppConfig,
    ImportDiagnostics,
    NoUsageOrLimits,
    Parsed,
    ParseError,
    RateLimitSnapshot,
    SessionFingerprint,
    UsageData,
    UsageEntry,
)
from codex_usage_monitor.utils.pricing import estimate_cost_usd

logger = logging.getLogger(__name__)

CODEX_PROVIDER = "codex"


def merge_codex_usage(
    data: UsageData,
    config: AppConfig,
    cache: CodexImportCache,
    now: float | None = None,
):
    """Run one import cycle and append imported records to *data*."""
    if not config.codex_import.enabled:
        return
    if now is None:
        now = time.time()

    changes_detected = False
    discovery_ran = False
    if cache.should_refresh_discovery(now):
        discovery_ran = True
        changes_detected = _refresh_discovery(cache, sessions_root(config), now)

    active: set[Path] = set()
    refreshed_files = 0
    parse_error_files = 0
    no_usage_or_limits_files = 0
    unreadable_files = 0
    for path in cache.session_files:
        active.add(path)
        try:
            stat = os.stat(path)
        except OSError as e:
            logger.debug("Cannot stat session file %s: %s", path, e)
            changes_detected = True
            unreadable_files += 1
            cache.remove(path)
            continue

        fingerprint = SessionFingerprint(modified_ns=stat.st_mtime_ns, file_len=stat.st_size)
        if not cache.is_stale(path, fingerprint):
            continue
        changes_detected = True
        refreshed_files += 1

        outcome = parse_session_file(path, fingerprint)
        if isinstance(outcome, Parsed):
            cache.put(path, outcome.session)
        elif isinstance(outcome, NoUsageOrLimits):
            no_usage_or_limits_files += 1
            cache.remove(path)
        elif isinstance(outcome, ParseError):
            parse_error_files += 1
            cache.remove(path)
        else:
            unreadable_files += 1
            cache.remove(path)
        logger.debug("Refreshed %s: %s", path, type(outcome).__name__)

    cache.retain(active)
    if discovery_ran:
        cache.tune_discovery_interval(changes_detected)
    cache.diagnostics = ImportDiagnostics(
        active_files=len(active),
        refreshed_files=refreshed_files,
        parse_error_files=parse_error_files,
        no_usage_or_limits_files=no_usage_or_limits_files,
        unreadable_files=unreadable_files,
        last_import_at=now,
        discovery_interval=cache.discovery_interval,
    )

    model = config.codex_import.model
    imported = [
        UsageEntry(
            timestamp=session.timestamp,
            provider=CODEX_PROVIDER,
            model=model,
            input_tokens=session.input_tokens,
            output_tokens=session.output_tokens,
            cost_usd=estimate_cost_usd(
                CODEX_PROVIDER,
                model,
                session.input_tokens,
                session.output_tokens,
                config.pricing,
            ),
        )
        for _, session in sorted(cache.sessions.items(), key=lambda item: item[0])
        if session.has_token_usage
    ]
    data.entries.extend(imported)
    data.entries.sort(key=lambda e: e.timestamp)


def _refresh_discovery(cache: CodexImportCache, root: Path, now: float) -> bool:
    """Walk *root* and replace the known file list. Returns True on a count change."""
    previous_count = len(cache.session_files)
    try:
        files = collect_session_files(root)
    except OSError as e:
        # Keep the previous list; a failed walk is not an empty tree
        logger.warning("Session discovery failed under %s: %s", root, e)
        cache.last_discovery_at = now
        return False

    if files is None:
        if previous_count:
            logger.warning("Codex sessions directory disappeared: %s", root)
        else:
            logger.debug("Codex sessions directory does not exist: %s", root)
        files = []
    cache.session_files = files
    cache.last_discovery_at = now
    return len(files) != previous_count


def latest_codex_limits(cache: CodexImportCache) -> RateLimitSnapshot | None:
    """Return the rate limits from the most recently written session.

    Ties on modification time are broken by the snapshot's own timestamp.
    """
    candidates = [
        (session.fingerprint.modified_ns, session.limits.timestamp, session.limits)
        for session in cache.sessions.values()
        if session.limits is not None
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda c: (c[0], c[1]))[2]


def codex_import_diagnostics(cache: CodexImportCache) -> ImportDiagnostics:
    return cache.diagnostics
