"""Periodic refresh of the usage ledger with imported Codex sessions."""

import logging
import time
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot, Property, QTimer

from codex_usage_monitor.services.codex_import import (
    codex_import_diagnostics,
    merge_codex_usage,
)
from codex_usage_monitor.services.config_manager import load_config, load_usage_data
from codex_usage_monitor.services.import_cache import CodexImportCache
from codex_usage_monitor.types import AppConfig, UsageData
from codex_usage_monitor.utils.usage_summary import provider_stats, provider_summaries

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_MS = 10_000


class UsageRefresher(QObject):
    """Reloads config and ledger on a timer and merges Codex usage into it.

    The ledger is re-read from disk on every tick, so imported records are
    appended to a fresh copy and never accumulate across ticks.
    """

    data_reloaded = Signal()
    status_changed = Signal(str)

    def __init__(
        self,
        config_file: str | Path,
        data_file: str | Path,
        parent=None,
        refresh_interval_ms: int = DEFAULT_REFRESH_INTERVAL_MS,
    ):
        super().__init__(parent)
        self._config_file = Path(config_file)
        self._data_file = Path(data_file)
        self._config = AppConfig()
        self._data = UsageData()
        self._codex_cache = CodexImportCache()
        self._status = "Ready"

        self._timer = QTimer(self)
        self._timer.setInterval(refresh_interval_ms)
        self._timer.timeout.connect(self.reload)

    def _get_status(self) -> str:
        return self._status

    def _set_status(self, value: str):
        if self._status != value:
            self._status = value
            self.status_changed.emit(value)

    status = Property(str, _get_status, notify=status_changed)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def data(self) -> UsageData:
        return self._data

    @property
    def codex_cache(self) -> CodexImportCache:
        return self._codex_cache

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self):
        """Reload immediately, then on every timer tick."""
        logger.info("Usage refresh started (every %dms)", self._timer.interval())
        self.reload()
        self._timer.start()

    def stop(self):
        self._timer.stop()
        logger.info("Usage refresh stopped")

    @Slot()
    def reload(self):
        """Reload config and ledger from disk and merge imported usage."""
        try:
            config = load_config(self._config_file)
            data = load_usage_data(self._data_file)
        except (OSError, ValueError) as e:
            logger.warning("Reload failed: %s", e)
            self._set_status(f"Reload failed: {e}")
            return

        merge_codex_usage(data, config, self._codex_cache)
        self._config = config
        self._data = data
        summaries = provider_summaries(data)
        for summary in summaries:
            logger.debug(
                "%s: %d tokens, $%.4f",
                summary.provider, summary.total_tokens, summary.total_cost_usd,
            )
        if summaries:
            top = provider_stats(data, summaries[0].provider)
            logger.debug(
                "Top provider %s: %d requests, %d tokens, $%.4f",
                top.provider, top.requests, top.total_tokens, top.total_cost_usd,
            )
        self._set_status(build_status_line(config, self._codex_cache))
        self.data_reloaded.emit()


def build_status_line(
    config: AppConfig,
    cache: CodexImportCache,
    now: float | None = None,
) -> str:
    """One-line summary of the last import cycle."""
    if not config.codex_import.enabled:
        return "Ready"
    if now is None:
        now = time.time()

    diagnostics = codex_import_diagnostics(cache)
    imported_ago = 0
    if diagnostics.last_import_at is not None and now >= diagnostics.last_import_at:
        imported_ago = int(now - diagnostics.last_import_at)
    return (
        f"Codex import files:{diagnostics.active_files}"
        f" refreshed:{diagnostics.refreshed_files}"
        f" parse_fail:{diagnostics.parse_error_files}"
        f" no_usage:{diagnostics.no_usage_or_limits_files}"
        f" unreadable:{diagnostics.unreadable_files}"
        f" scan:{int(diagnostics.discovery_interval)}s"
        f" updated:{imported_ago}s"
    )
