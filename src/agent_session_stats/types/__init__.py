"""Type definitions for Agent Session Stats."""

from agent_session_stats.types.stats import (
    GLOBAL_STATS_CACHE_VERSION,
    CachedSessionStats,
    GlobalAggregate,
    GlobalStatsCache,
    ProviderAggregate,
    ProviderCache,
    ScanPhase,
    SessionFileRef,
)

__all__ = [
    "GLOBAL_STATS_CACHE_VERSION",
    "CachedSessionStats",
    "GlobalAggregate",
    "GlobalStatsCache",
    "ProviderAggregate",
    "ProviderCache",
    "ScanPhase",
    "SessionFileRef",
]
