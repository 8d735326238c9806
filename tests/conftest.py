"""Shared test fixtures for Agent Session Stats."""

import os
import sys
from pathlib import Path

import pytest

from agent_session_stats.services.providers import CLAUDE_CODE, CODEX
from agent_session_stats.services.stats_cache import StatsCache


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
def claude_root(tmp_path) -> Path:
    """Empty Claude Code projects directory."""
    root = tmp_path / ".claude" / "projects"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def codex_root(tmp_path) -> Path:
    """Empty Codex sessions directory."""
    root = tmp_path / ".codex" / "sessions"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def roots(claude_root, codex_root) -> dict[str, Path]:
    return {CLAUDE_CODE: claude_root, CODEX: codex_root}


@pytest.fixture
def cache_file(tmp_path) -> Path:
    return tmp_path / "cache" / "global-stats.json"


@pytest.fixture
def stats_cache(cache_file) -> StatsCache:
    return StatsCache(cache_file)


@pytest.fixture
def isolated_settings(tmp_path):
    """Point QSettings at a temp directory."""
    from PySide6.QtCore import QSettings
    QSettings.setDefaultFormat(QSettings.IniFormat)
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path / "config"))
