"""Per-provider session log parsers producing CachedSessionStats.

Parsers are pure: they take the raw file content and its size and never
raise on malformed input. Unparsable records contribute zero.
"""

import logging
import re

import orjson

from agent_session_stats.types.stats import CachedSessionStats

logger = logging.getLogger(__name__)

_USER_MARKER = re.compile(r'"type"\s*:\s*"user"')
_ASSISTANT_MARKER = re.compile(r'"type"\s*:\s*"assistant"')
_INPUT_TOKENS = re.compile(r'"input_tokens"\s*:\s*(\d+)')
_OUTPUT_TOKENS = re.compile(r'"output_tokens"\s*:\s*(\d+)')
_CACHE_READ_TOKENS = re.compile(r'"cache_read_input_tokens"\s*:\s*(\d+)')
_CACHE_CREATION_TOKENS = re.compile(r'"cache_creation_input_tokens"\s*:\s*(\d+)')


def _sum_matches(pattern: re.Pattern, content: str) -> int:
    return sum(int(m.group(1)) for m in pattern.finditer(content))


def parse_claude_session_content(content: str, size_bytes: int) -> CachedSessionStats:
    """Scan a Claude Code session log for message markers and usage fields.

    Every occurrence of a token field is added to the total. Repeated usage
    blocks for the same message are not deduplicated.
    """
    messages = len(_USER_MARKER.findall(content)) + len(_ASSISTANT_MARKER.findall(content))
    return CachedSessionStats(
        message_count=messages,
        input_tokens=_sum_matches(_INPUT_TOKENS, content),
        output_tokens=_sum_matches(_OUTPUT_TOKENS, content),
        cache_read_tokens=_sum_matches(_CACHE_READ_TOKENS, content),
        cache_creation_tokens=_sum_matches(_CACHE_CREATION_TOKENS, content),
        cached_input_tokens=0,
        size_bytes=size_bytes,
    )


def _usage_int(usage: dict, key: str) -> int:
    value = usage.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def parse_codex_session_content(content: str, size_bytes: int) -> CachedSessionStats:
    """Parse a Codex rollout log, one JSON record per line.

    Messages are counted from user/assistant ``response_item`` records.
    Tokens come from ``token_count`` events; each event's
    ``total_token_usage`` snapshot is added to the running totals.
    """
    stats = CachedSessionStats(size_bytes=size_bytes)

    line_num = 0
    for line in content.split("\n"):
        line_num += 1
        line = line.strip()
        if not line:
            continue

        try:
            entry = orjson.loads(line)
        except orjson.JSONDecodeError as e:
            logger.warning("Malformed JSON at line %d: %s", line_num, e)
            continue

        if not isinstance(entry, dict):
            continue

        payload = entry.get("payload")
        if not isinstance(payload, dict):
            continue

        entry_type = entry.get("type")
        if entry_type == "response_item" and payload.get("type") == "message":
            if payload.get("role") in ("user", "assistant"):
                stats.message_count += 1
        elif entry_type == "event_msg" and payload.get("type") == "token_count":
            info = payload.get("info")
            if not isinstance(info, dict):
                continue
            usage = info.get("total_token_usage")
            if not isinstance(usage, dict):
                continue
            stats.input_tokens += _usage_int(usage, "input_tokens")
            stats.output_tokens += _usage_int(usage, "output_tokens")
            stats.output_tokens += _usage_int(usage, "reasoning_output_tokens")
            stats.cached_input_tokens += _usage_int(usage, "cached_input_tokens")

    return stats


def parse_session(provider_id: str, content: str, size_bytes: int) -> CachedSessionStats:
    """Parse session content with the parser registered for ``provider_id``.

    Raises KeyError for an unregistered provider.
    """
    from agent_session_stats.services.providers import get_provider

    return get_provider(provider_id).parse(content, size_bytes)
