"""Versioned JSON cache of per-session statistics."""

import logging
import os
import time
from pathlib import Path

import orjson

from agent_session_stats.types.stats import (
    GLOBAL_STATS_CACHE_VERSION,
    CachedSessionStats,
    GlobalStatsCache,
)

logger = logging.getLogger(__name__)

DEFAULT_CACHE_FILE = (
    Path.home() / ".cache" / "agent-session-stats" / "stats-cache" / "global-stats.json"
)


class StatsCache:
    """Loads and saves the GlobalStatsCache document.

    Neither ``load`` nor ``save`` raises: an unusable cache behaves as an
    empty one, and a failed save only loses the cache for the next run.
    """

    def __init__(self, cache_path: str | Path | None = None):
        self._path = Path(cache_path) if cache_path else DEFAULT_CACHE_FILE

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> GlobalStatsCache:
        try:
            raw = orjson.loads(self._path.read_bytes())
        except FileNotFoundError:
            return GlobalStatsCache.empty()
        except (OSError, orjson.JSONDecodeError):
            logger.warning("Unreadable stats cache %s, starting fresh", self._path, exc_info=True)
            return GlobalStatsCache.empty()

        if not isinstance(raw, dict):
            return GlobalStatsCache.empty()

        version = raw.get("version")
        if version != GLOBAL_STATS_CACHE_VERSION:
            logger.info(
                "Stats cache version %s does not match %d, discarding",
                version, GLOBAL_STATS_CACHE_VERSION,
            )
            return GlobalStatsCache.empty()

        return self._from_document(raw)

    def save(self, cache: GlobalStatsCache) -> bool:
        """Atomically write the cache. Returns False if it could not be written."""
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(orjson.dumps(cache.to_dict()))
            os.replace(tmp_path, self._path)
        except (OSError, TypeError):
            logger.warning("Failed to save stats cache %s", self._path, exc_info=True)
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                pass
            return False
        return True

    def clear(self):
        """Delete the cache file, forcing a full rescan next run."""
        try:
            self._path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to remove stats cache %s", self._path, exc_info=True)

    def _from_document(self, raw: dict) -> GlobalStatsCache:
        last_updated = raw.get("lastUpdated")
        if not isinstance(last_updated, int):
            last_updated = int(time.time() * 1000)
        cache = GlobalStatsCache(last_updated=last_updated)

        providers = raw.get("providers")
        if not isinstance(providers, dict):
            return cache

        for provider_id, provider_doc in providers.items():
            sessions = provider_doc.get("sessions") if isinstance(provider_doc, dict) else None
            if not isinstance(sessions, dict):
                continue
            target = cache.sessions_for(provider_id)
            for key, entry in sessions.items():
                if isinstance(entry, dict):
                    target[key] = CachedSessionStats.from_dict(entry)
        return cache
