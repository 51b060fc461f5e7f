"""Tolerant parser for Codex session logs.

A session log holds one JSON event per line. Only ``token_count`` events
(``type == "event_msg"`` with ``payload.type == "token_count"``) contribute
token usage and rate limits; ``session_meta`` events provide a fallback
timestamp. Token totals are running totals, so the last event in file order
wins rather than the largest or the sum.
"""

import logging
from pathlib import Path
from typing import Iterable

import orjson

from codex_usage_monitor.types.codex import (
    CachedSession,
    ContentsOutcome,
    FileOutcome,
    NoUsageOrLimits,
    Parsed,
    ParsedContents,
    ParseError,
    RateLimit,
    RateLimitSnapshot,
    SessionFacts,
    SessionFingerprint,
    Unreadable,
)

logger = logging.getLogger(__name__)


def parse_session_file(path: str | Path, fingerprint: SessionFingerprint) -> FileOutcome:
    """Parse a session log on disk, tagging the result with *fingerprint*."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            outcome = parse_session_lines(f)
    except UnicodeDecodeError:
        logger.debug("Session file is not valid UTF-8: %s", path)
        return ParseError()
    except OSError as e:
        logger.debug("Cannot read session file %s: %s", path, e)
        return Unreadable(reason=str(e))

    if isinstance(outcome, ParsedContents):
        return Parsed(CachedSession(fingerprint=fingerprint, facts=outcome.facts))
    return outcome


def parse_session_contents(contents: str) -> ContentsOutcome:
    """Parse an in-memory session log."""
    return parse_session_lines(contents.splitlines())


def parse_session_lines(lines: Iterable[str]) -> ContentsOutcome:
    """Classify a session log given as an iterable of lines.

    An event with any ill-typed part is skipped as a whole: it moves neither
    the timestamp nor the totals nor the rate-limit snapshot.
    """
    structured_lines = 0
    session_timestamp: str | None = None
    latest_event_timestamp: str | None = None
    input_tokens = 0
    output_tokens = 0
    has_token_usage = False
    latest_limits: RateLimitSnapshot | None = None

    for line in lines:
        line = line.strip()
        if not line:
            continue

        try:
            record = orjson.loads(line)
        except orjson.JSONDecodeError:
            continue
        if not _is_structured(record):
            continue
        structured_lines += 1

        record_type = record["type"]
        payload = record.get("payload") or {}

        if record_type == "session_meta":
            ts = payload.get("timestamp")
            if isinstance(ts, str):
                session_timestamp = ts
            continue

        if record_type != "event_msg" or payload.get("type") != "token_count":
            continue

        try:
            event_timestamp, totals, primary, secondary = _parse_token_count(record, payload)
        except ValueError as e:
            logger.debug("Skipping malformed token_count event: %s", e)
            continue

        if event_timestamp is not None:
            latest_event_timestamp = event_timestamp
            if primary is not None or secondary is not None:
                latest_limits = RateLimitSnapshot(
                    timestamp=event_timestamp, primary=primary, secondary=secondary,
                )

        if totals is not None:
            input_tokens, output_tokens = totals
            has_token_usage = True

    if structured_lines == 0:
        return ParseError()

    timestamp = latest_event_timestamp if latest_event_timestamp is not None else session_timestamp
    if timestamp is None:
        return NoUsageOrLimits()

    if not has_token_usage and latest_limits is None:
        return NoUsageOrLimits()

    return ParsedContents(SessionFacts(
        timestamp=timestamp,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        has_token_usage=has_token_usage,
        limits=latest_limits,
    ))


def _is_structured(record) -> bool:
    """An event envelope: a string ``type`` and an optional object payload."""
    if not isinstance(record, dict) or not isinstance(record.get("type"), str):
        return False
    payload = record.get("payload")
    if payload is None:
        return True
    if not isinstance(payload, dict):
        return False
    payload_type = payload.get("type")
    return payload_type is None or isinstance(payload_type, str)


def _parse_token_count(record: dict, payload: dict):
    """Validate a whole token_count event before any part of it is applied.

    Returns ``(timestamp, totals, primary, secondary)``; raises ValueError
    if any present field is ill-typed.
    """
    timestamp = record.get("timestamp")
    if timestamp is not None and not isinstance(timestamp, str):
        raise ValueError(f"timestamp is {timestamp!r}")

    totals = None
    info = _optional_object(payload, "info")
    if info is not None:
        usage = _optional_object(info, "total_token_usage")
        if usage is not None:
            totals = (_count(usage, "input_tokens"), _count(usage, "output_tokens"))

    primary = secondary = None
    rate_limits = _optional_object(payload, "rate_limits")
    if rate_limits is not None:
        primary = _parse_rate_limit(_optional_object(rate_limits, "primary"))
        secondary = _parse_rate_limit(_optional_object(rate_limits, "secondary"))
    return timestamp, totals, primary, secondary


def _parse_rate_limit(node: dict | None) -> RateLimit | None:
    if node is None:
        return None
    used_percent = node.get("used_percent")
    # used_percent is written as either 7 or 7.0
    if isinstance(used_percent, bool) or not isinstance(used_percent, (int, float)):
        raise ValueError(f"used_percent is {used_percent!r}")
    resets_at = node.get("resets_at")
    if resets_at is not None:
        resets_at = _count(node, "resets_at")
    return RateLimit(
        used_percent=float(used_percent),
        window_minutes=_count(node, "window_minutes"),
        resets_at=resets_at,
    )


def _optional_object(parent: dict, key: str) -> dict | None:
    value = parent.get(key)
    if value is not None and not isinstance(value, dict):
        raise ValueError(f"{key} is not an object")
    return value


def _count(parent: dict, key: str) -> int:
    value = parent.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"{key} is {value!r}")
    return value
