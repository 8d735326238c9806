"""Session file, cache and aggregate types for usage statistics."""

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Bump whenever CachedSessionStats changes shape; older caches are discarded.
GLOBAL_STATS_CACHE_VERSION = 2


class ScanPhase(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    REPARSING = "reparsing"
    DONE = "done"


@dataclass
class SessionFileRef:
    """A session file found on disk. Recomputed every scan."""
    path: Path
    session_key: str
    mtime_ms: float


def _as_int(value) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


@dataclass
class CachedSessionStats:
    message_count: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_creation_tokens: int = 0
    cached_input_tokens: int = 0
    size_bytes: int = 0
    file_mtime_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "messages": self.message_count,
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "cacheReadTokens": self.cache_read_tokens,
            "cacheCreationTokens": self.cache_creation_tokens,
            "cachedInputTokens": self.cached_input_tokens,
            "sizeBytes": self.size_bytes,
            "fileMtimeMs": self.file_mtime_ms,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "CachedSessionStats":
        mtime = raw.get("fileMtimeMs", 0)
        if isinstance(mtime, bool) or not isinstance(mtime, (int, float)):
            mtime = 0
        return cls(
            message_count=_as_int(raw.get("messages")),
            input_tokens=_as_int(raw.get("inputTokens")),
            output_tokens=_as_int(raw.get("outputTokens")),
            cache_read_tokens=_as_int(raw.get("cacheReadTokens")),
            cache_creation_tokens=_as_int(raw.get("cacheCreationTokens")),
            cached_input_tokens=_as_int(raw.get("cachedInputTokens")),
            size_bytes=_as_int(raw.get("sizeBytes")),
            file_mtime_ms=float(mtime),
        )


# session key -> stats, scoped to one provider
ProviderCache = dict[str, CachedSessionStats]


@dataclass
class GlobalStatsCache:
    version: int = GLOBAL_STATS_CACHE_VERSION
    last_updated: int = 0
    providers: dict[str, ProviderCache] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "GlobalStatsCache":
        return cls(last_updated=int(time.time() * 1000))

    def sessions_for(self, provider_id: str) -> ProviderCache:
        """Return the provider's session mapping, creating it if missing."""
        return self.providers.setdefault(provider_id, {})

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "lastUpdated": self.last_updated,
            "providers": {
                provider_id: {
                    "sessions": {key: stats.to_dict() for key, stats in sessions.items()},
                }
                for provider_id, sessions in self.providers.items()
            },
        }


@dataclass
class ProviderAggregate:
    session_count: int = 0
    message_count: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_creation_tokens: int = 0
    cached_input_tokens: int = 0
    size_bytes: int = 0
    cost_usd: float = 0.0
    has_cost_data: bool = False

    def to_dict(self) -> dict:
        return {
            "sessions": self.session_count,
            "messages": self.message_count,
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "costUsd": self.cost_usd,
            "hasCostData": self.has_cost_data,
            "sizeBytes": self.size_bytes,
        }


@dataclass
class GlobalAggregate:
    """One emitted snapshot of the aggregated statistics."""
    total_sessions: int = 0
    total_messages: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_cache_read_tokens: int = 0
    total_cache_creation_tokens: int = 0
    total_cost_usd: float = 0.0
    total_size_bytes: int = 0
    has_cost_data: bool = False
    is_complete: bool = False
    by_provider: dict[str, ProviderAggregate] = field(default_factory=dict)
    # Progress of the run that produced this snapshot, not part of the totals
    processed_count: int = field(default=0, compare=False)
    total_to_process: int = field(default=0, compare=False)

    def to_dict(self) -> dict:
        return {
            "totalSessions": self.total_sessions,
            "totalMessages": self.total_messages,
            "totalInputTokens": self.total_input_tokens,
            "totalOutputTokens": self.total_output_tokens,
            "totalCacheReadTokens": self.total_cache_read_tokens,
            "totalCacheCreationTokens": self.total_cache_creation_tokens,
            "totalCostUsd": self.total_cost_usd,
            "hasCostData": self.has_cost_data,
            "totalSizeBytes": self.total_size_bytes,
            "isComplete": self.is_complete,
            "byProvider": {
                provider_id: agg.to_dict() for provider_id, agg in self.by_provider.items()
            },
        }
