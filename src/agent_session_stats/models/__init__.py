"""Qt models for Agent Session Stats."""

from agent_session_stats.models.provider_stats_model import ProviderStatsModel

__all__ = ["ProviderStatsModel"]
