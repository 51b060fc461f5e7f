"""Shared test fixtures for Codex Usage Monitor."""

import os
import sys
from pathlib import Path

import pytest

from codex_usage_monitor.services.import_cache import CodexImportCache
from codex_usage_monitor.types import AppConfig, CodexImportConfig, UsageData

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def qapp():
    """Create a QCoreApplication for tests that need Qt."""
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv or ["test"])
    yield app


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def sessions_dir(tmp_path) -> Path:
    """Create a temporary Codex sessions tree (sessions/YYYY/MM/DD)."""
    root = tmp_path / ".codex" / "sessions"
    (root / "2026" / "02" / "18").mkdir(parents=True)
    return root


@pytest.fixture
def day_dir(sessions_dir) -> Path:
    return sessions_dir / "2026" / "02" / "18"


@pytest.fixture
def config(sessions_dir) -> AppConfig:
    return AppConfig(codex_import=CodexImportConfig(
        enabled=True,
        sessions_dir=str(sessions_dir),
        model="codex-cli",
    ))


@pytest.fixture
def cache() -> CodexImportCache:
    return CodexImportCache()


@pytest.fixture
def data() -> UsageData:
    return UsageData(budget_usd=10.0)
