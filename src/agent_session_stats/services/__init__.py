"""Services for Agent Session Stats."""

from agent_session_stats.services.stats_engine import GlobalStatsEngine, StatsRunInProgressError
from agent_session_stats.services.stats_manager import StatsManager
from agent_session_stats.services.stats_cache import StatsCache
from agent_session_stats.services.providers import PROVIDERS, ProviderSpec, get_provider
from agent_session_stats.services.config_manager import ConfigManager

__all__ = [
    "GlobalStatsEngine",
    "StatsRunInProgressError",
    "StatsManager",
    "StatsCache",
    "PROVIDERS",
    "ProviderSpec",
    "get_provider",
    "ConfigManager",
]
