"""Registry of supported agents: where their logs live and how to read them."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from agent_session_stats.services.session_discovery import (
    discover_date_tree,
    discover_project_tree,
)
from agent_session_stats.services.stats_parsers import (
    parse_claude_session_content,
    parse_codex_session_content,
)
from agent_session_stats.types.stats import CachedSessionStats, SessionFileRef

CLAUDE_CODE = "claude-code"
CODEX = "codex"


@dataclass(frozen=True)
class ProviderSpec:
    id: str
    label: str
    default_root: Path
    discover: Callable[[Path], list[SessionFileRef]]
    parse: Callable[[str, int], CachedSessionStats]
    has_cost_data: bool = False


PROVIDERS: list[ProviderSpec] = [
    ProviderSpec(
        id=CLAUDE_CODE,
        label="Claude Code",
        default_root=Path.home() / ".claude" / "projects",
        discover=discover_project_tree,
        parse=parse_claude_session_content,
        has_cost_data=True,
    ),
    ProviderSpec(
        id=CODEX,
        label="Codex",
        default_root=Path.home() / ".codex" / "sessions",
        discover=discover_date_tree,
        parse=parse_codex_session_content,
        has_cost_data=False,
    ),
]


def get_provider(provider_id: str) -> ProviderSpec:
    for provider in PROVIDERS:
        if provider.id == provider_id:
            return provider
    raise KeyError(provider_id)


def provider_ids() -> list[str]:
    return [p.id for p in PROVIDERS]
