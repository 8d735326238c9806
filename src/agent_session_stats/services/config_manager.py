"""Application configuration manager wrapping QSettings."""

import logging
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot, QSettings

from agent_session_stats.services.providers import CLAUDE_CODE, CODEX
from agent_session_stats.services.stats_cache import StatsCache

logger = logging.getLogger(__name__)

# Default values
DEFAULTS = {
    "paths/claudeProjectsDir": "~/.claude/projects",
    "paths/codexSessionsDir": "~/.codex/sessions",
    "paths/cacheFile": "~/.cache/agent-session-stats/stats-cache/global-stats.json",
    "stats/progressInterval": 10,
    "stats/showCosts": True,
    "stats/pricingModel": "claude-sonnet-4",
    "advanced/debugLogging": False,
}

_PROVIDER_ROOT_KEYS = {
    CLAUDE_CODE: "paths/claudeProjectsDir",
    CODEX: "paths/codexSessionsDir",
}


class ConfigManager(QObject):
    """Centralized application settings."""

    settings_changed = Signal(str)  # key

    def __init__(self, parent=None):
        super().__init__(parent)
        self._settings = QSettings()

    @Slot(str, result=str)
    def get_string(self, key: str) -> str:
        return str(self._settings.value(key, DEFAULTS.get(key, "")))

    @Slot(str, result=int)
    def get_int(self, key: str) -> int:
        val = self._settings.value(key, DEFAULTS.get(key, 0))
        try:
            return int(val)
        except (ValueError, TypeError):
            return DEFAULTS.get(key, 0)

    @Slot(str, result=bool)
    def get_bool(self, key: str) -> bool:
        val = self._settings.value(key, DEFAULTS.get(key, False))
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.lower() in ("true", "1", "yes")
        return bool(val)

    @Slot(str, str)
    def set_string(self, key: str, value: str):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, int)
    def set_int(self, key: str, value: int):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, bool)
    def set_bool(self, key: str, value: bool):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    def provider_roots(self) -> dict[str, Path]:
        """Session root directory per provider id, with ~ expanded."""
        return {
            provider_id: Path(self.get_string(key)).expanduser()
            for provider_id, key in _PROVIDER_ROOT_KEYS.items()
        }

    def cache_file(self) -> Path:
        return Path(self.get_string("paths/cacheFile")).expanduser()

    @Slot()
    def clear_cache(self):
        """Delete the stats cache so the next run rescans everything."""
        StatsCache(self.cache_file()).clear()
        logger.info("Cleared stats cache %s", self.cache_file())
