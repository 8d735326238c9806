"""Diff discovered session files against the cached entries."""

from dataclasses import dataclass, field

from agent_session_stats.types.stats import ProviderCache, SessionFileRef


@dataclass
class ReconcilePlan:
    to_reparse: list[SessionFileRef] = field(default_factory=list)
    to_evict: list[str] = field(default_factory=list)
    reusable: list[str] = field(default_factory=list)


def reconcile(files: list[SessionFileRef], provider_cache: ProviderCache) -> ReconcilePlan:
    """Partition files into new/modified, deleted and unchanged sessions.

    A session is stale when it has no cache entry or its cached mtime is
    strictly older than the file on disk. Content is never compared.
    """
    plan = ReconcilePlan()
    current_keys = set()

    for ref in files:
        current_keys.add(ref.session_key)
        cached = provider_cache.get(ref.session_key)
        if cached is None or cached.file_mtime_ms < ref.mtime_ms:
            plan.to_reparse.append(ref)
        else:
            plan.reusable.append(ref.session_key)

    plan.to_evict = sorted(key for key in provider_cache if key not in current_keys)
    return plan


def apply_evictions(provider_cache: ProviderCache, plan: ReconcilePlan) -> int:
    """Remove entries whose files are gone. Returns the number removed."""
    removed = 0
    for key in plan.to_evict:
        if provider_cache.pop(key, None) is not None:
            removed += 1
    return removed
