"""Discovery of session log files in each provider's directory layout.

Discovery only lists directory entries and stats files; it never reads file
content. Missing roots yield no files and unreadable paths are skipped.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from agent_session_stats.types.stats import SessionFileRef

if TYPE_CHECKING:
    from agent_session_stats.services.providers import ProviderSpec

logger = logging.getLogger(__name__)

SESSION_SUFFIX = ".jsonl"

_YEAR = re.compile(r"[0-9]{4}")
_MONTH_OR_DAY = re.compile(r"[0-9]{2}")


def _list_dir(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError:
        logger.debug("Cannot list %s", directory, exc_info=True)
        return []


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _session_files(directory: Path, key_prefix: str) -> list[SessionFileRef]:
    """Stat every .jsonl file directly inside ``directory``."""
    refs = []
    for entry in _list_dir(directory):
        if not entry.name.endswith(SESSION_SUFFIX):
            continue
        try:
            st = entry.stat()
        except OSError:
            logger.debug("Cannot stat %s", entry, exc_info=True)
            continue
        refs.append(SessionFileRef(
            path=entry,
            session_key=f"{key_prefix}/{entry.name[:-len(SESSION_SUFFIX)]}",
            mtime_ms=st.st_mtime_ns / 1_000_000,
        ))
    return refs


def discover_project_tree(root: Path) -> list[SessionFileRef]:
    """Discover ``<root>/<project-dir>/<session>.jsonl`` files.

    Session keys are ``project-dir/session``.
    """
    root = Path(root)
    if not _is_dir(root):
        return []

    files = []
    for project_dir in _list_dir(root):
        if not _is_dir(project_dir):
            continue
        files.extend(_session_files(project_dir, project_dir.name))
    files.sort(key=lambda f: f.session_key)
    return files


def discover_date_tree(root: Path) -> list[SessionFileRef]:
    """Discover ``<root>/yyyy/mm/dd/<session>.jsonl`` files.

    Each level is validated by its numeric pattern before descending.
    Session keys are ``yyyy/mm/dd/session``.
    """
    root = Path(root)
    if not _is_dir(root):
        return []

    files = []
    for year_dir in _list_dir(root):
        if not _YEAR.fullmatch(year_dir.name) or not _is_dir(year_dir):
            continue
        for month_dir in _list_dir(year_dir):
            if not _MONTH_OR_DAY.fullmatch(month_dir.name) or not _is_dir(month_dir):
                continue
            for day_dir in _list_dir(month_dir):
                if not _MONTH_OR_DAY.fullmatch(day_dir.name) or not _is_dir(day_dir):
                    continue
                prefix = f"{year_dir.name}/{month_dir.name}/{day_dir.name}"
                files.extend(_session_files(day_dir, prefix))
    files.sort(key=lambda f: f.session_key)
    return files


def _discover_one(provider: "ProviderSpec", root: Path) -> list[SessionFileRef]:
    try:
        return provider.discover(root)
    except Exception:
        logger.warning("Discovery failed for %s under %s", provider.id, root, exc_info=True)
        return []


def discover_all(
    providers: list["ProviderSpec"],
    roots: dict[str, Path] | None = None,
) -> dict[str, list[SessionFileRef]]:
    """Discover session files for every provider concurrently.

    ``roots`` overrides a provider's default root directory by provider id.
    """
    roots = roots or {}
    if not providers:
        return {}

    with ThreadPoolExecutor(max_workers=len(providers)) as pool:
        futures = {
            p.id: pool.submit(_discover_one, p, Path(roots.get(p.id, p.default_root)))
            for p in providers
        }
        return {provider_id: future.result() for provider_id, future in futures.items()}
