"""Services for Codex Usage Monitor."""

from codex_usage_monitor.services.codex_import import (
    codex_import_diagnostics,
    latest_codex_limits,
    merge_codex_usage,
)
from codex_usage_monitor.services.import_cache import CodexImportCache
from codex_usage_monitor.services.session_discovery import collect_session_files, sessions_root
from codex_usage_monitor.services.session_parser import (
    parse_session_contents,
    parse_session_file,
    parse_session_lines,
)
from codex_usage_monitor.services.config_manager import load_config, load_usage_data

__all__ = [
    "codex_import_diagnostics",
    "latest_codex_limits",
    "merge_codex_usage",
    "CodexImportCache",
    "collect_session_files",
    "sessions_root",
    "parse_session_contents",
    "parse_session_file",
    "parse_session_lines",
    "load_config",
    "load_usage_data",
]
