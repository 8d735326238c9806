"""Reduce cached session stats into provider and global aggregates."""

from agent_session_stats.types.stats import (
    GlobalAggregate,
    GlobalStatsCache,
    ProviderAggregate,
    ProviderCache,
)
from agent_session_stats.utils.cost_model import DEFAULT_PRICING_MODEL, calculate_cost


def aggregate_provider(
    sessions: ProviderCache,
    has_cost_data: bool,
    pricing_model: str = DEFAULT_PRICING_MODEL,
) -> ProviderAggregate:
    """Sum every session of one provider. Cost only for billable providers."""
    agg = ProviderAggregate(session_count=len(sessions), has_cost_data=has_cost_data)
    for stats in sessions.values():
        agg.message_count += stats.message_count
        agg.input_tokens += stats.input_tokens
        agg.output_tokens += stats.output_tokens
        agg.cache_read_tokens += stats.cache_read_tokens
        agg.cache_creation_tokens += stats.cache_creation_tokens
        agg.cached_input_tokens += stats.cached_input_tokens
        agg.size_bytes += stats.size_bytes

    if has_cost_data:
        agg.cost_usd = calculate_cost(
            agg.input_tokens,
            agg.output_tokens,
            agg.cache_read_tokens,
            agg.cache_creation_tokens,
            model=pricing_model,
        )
    return agg


def aggregate_global(
    providers: dict[str, ProviderAggregate],
    is_complete: bool = False,
) -> GlobalAggregate:
    """Combine provider aggregates, skipping providers with no sessions.

    Cached input reported by providers without a read/creation split is
    counted as cache reads in the global total.
    """
    result = GlobalAggregate(is_complete=is_complete)
    for provider_id, agg in providers.items():
        if agg.session_count == 0:
            continue
        result.by_provider[provider_id] = agg
        result.total_sessions += agg.session_count
        result.total_messages += agg.message_count
        result.total_input_tokens += agg.input_tokens
        result.total_output_tokens += agg.output_tokens
        result.total_cache_read_tokens += agg.cache_read_tokens + agg.cached_input_tokens
        result.total_cache_creation_tokens += agg.cache_creation_tokens
        result.total_size_bytes += agg.size_bytes
        if agg.has_cost_data:
            result.total_cost_usd += agg.cost_usd
            result.has_cost_data = True
    return result


def build_snapshot(
    cache: GlobalStatsCache,
    providers: list,
    is_complete: bool,
    processed_count: int = 0,
    total_to_process: int = 0,
    pricing_model: str = DEFAULT_PRICING_MODEL,
) -> GlobalAggregate:
    """Aggregate the cache across ``providers`` (ProviderSpec list, in order)."""
    per_provider = {
        p.id: aggregate_provider(cache.providers.get(p.id, {}), p.has_cost_data, pricing_model)
        for p in providers
    }
    snapshot = aggregate_global(per_provider, is_complete=is_complete)
    snapshot.processed_count = processed_count
    snapshot.total_to_process = total_to_process
    return snapshot
