"""Discovery of Codex session logs under the sessions root."""

import logging
import os
from pathlib import Path

from codex_usage_monitor.types import AppConfig

logger = logging.getLogger(__name__)

SESSION_FILE_SUFFIX = ".jsonl"


def codex_home() -> Path:
    """Resolve CODEX_HOME, defaulting to ~/.codex."""
    value = os.environ.get("CODEX_HOME")
    if value:
        return Path(value).expanduser()
    return Path.home() / ".codex"


def sessions_root(config: AppConfig) -> Path:
    """Return the configured sessions directory, or the Codex default."""
    if config.codex_import.sessions_dir:
        return Path(config.codex_import.sessions_dir).expanduser()
    return codex_home() / "sessions"


def collect_session_files(root: str | Path) -> list[Path] | None:
    """List every session log under *root*, recursively.

    Returns None when *root* does not exist, so a missing tree can be told
    apart from an empty one. Errors while walking are raised, never turned
    into a partial list.
    """
    root = Path(root)
    if not root.exists():
        return None

    files: list[Path] = []
    _collect_recursive(root, files)
    files.sort()
    return files


def _collect_recursive(directory: Path, files: list[Path]):
    with os.scandir(directory) as entries:
        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir():
                _collect_recursive(path, files)
                continue
            if path.suffix == SESSION_FILE_SUFFIX:
                files.append(path)
