"""Application entry point: a headless refresh loop on a Qt event loop."""

import logging
import os
import signal
import sys

from PySide6.QtCore import QCoreApplication

from codex_usage_monitor.services.config_manager import default_config_file, default_data_file
from codex_usage_monitor.services.usage_refresher import UsageRefresher

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CODEX_USAGE_MONITOR_LOG_LEVEL"


def run() -> int:
    """Launch the refresh loop and log each status line until interrupted."""
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QCoreApplication(sys.argv)
    app.setApplicationName("Codex Usage Monitor")
    app.setOrganizationName("codex-usage-monitor")

    # Allow Ctrl+C to kill the app
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    refresher = UsageRefresher(default_config_file(), default_data_file())
    refresher.status_changed.connect(logger.info)
    refresher.start()

    ret = app.exec()
    refresher.stop()
    return ret
