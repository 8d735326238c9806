"""Incremental aggregation of usage statistics across all providers."""

import logging
import threading
import time
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from agent_session_stats.services.aggregator import build_snapshot
from agent_session_stats.services.providers import PROVIDERS, ProviderSpec
from agent_session_stats.services.reconciler import apply_evictions, reconcile
from agent_session_stats.services.session_discovery import discover_all
from agent_session_stats.services.stats_cache import StatsCache
from agent_session_stats.types.stats import (
    GlobalAggregate,
    GlobalStatsCache,
    ScanPhase,
    SessionFileRef,
)
from agent_session_stats.utils.cost_model import DEFAULT_PRICING_MODEL

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_INTERVAL = 10

# At most one active run per process, across all engines
_run_lock = threading.Lock()


class StatsRunInProgressError(RuntimeError):
    """Raised when a run is requested while another one is active."""


class GlobalStatsEngine(QObject):
    """Computes global usage stats, reparsing only sessions that changed.

    Each run loads the cache, discovers files, evicts deleted sessions,
    reparses new or modified ones and saves the cache. Snapshots are emitted
    through ``snapshot_ready`` as the run progresses; the last one has
    ``is_complete`` set and is also returned by ``compute_global_stats``.
    """

    snapshot_ready = Signal(object)  # GlobalAggregate
    phase_changed = Signal(str)      # ScanPhase value

    def __init__(
        self,
        providers: list[ProviderSpec] | None = None,
        roots: dict[str, Path] | None = None,
        cache: StatsCache | None = None,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        pricing_model: str = DEFAULT_PRICING_MODEL,
        parent=None,
    ):
        super().__init__(parent)
        self._providers = list(providers) if providers is not None else list(PROVIDERS)
        self._roots = dict(roots or {})
        self._cache = cache if cache is not None else StatsCache()
        self._progress_interval = max(1, progress_interval)
        self._pricing_model = pricing_model
        self._running = False
        self._phase = ScanPhase.IDLE
        self._last_snapshot: GlobalAggregate | None = None
        self.last_reparsed: list[str] = []

    @property
    def phase(self) -> ScanPhase:
        return self._phase

    @property
    def last_snapshot(self) -> GlobalAggregate | None:
        return self._last_snapshot

    @property
    def is_running(self) -> bool:
        return self._running

    def compute_global_stats(self) -> GlobalAggregate:
        """Run one aggregation pass and return the final snapshot.

        Raises StatsRunInProgressError if any engine in this process is
        already running.
        """
        if not _run_lock.acquire(blocking=False):
            raise StatsRunInProgressError("global stats run already in progress")
        self._running = True
        try:
            return self._run()
        finally:
            self._running = False
            _run_lock.release()

    def _run(self) -> GlobalAggregate:
        self._set_phase(ScanPhase.SCANNING)
        self.last_reparsed = []
        cache = self._cache.load()
        for provider in self._providers:
            cache.sessions_for(provider.id)

        logger.info("Discovering session files for global stats")
        discovered = discover_all(self._providers, self._roots)

        pending: list[tuple[ProviderSpec, SessionFileRef]] = []
        per_provider_counts = []
        total_files = 0
        for provider in self._providers:
            files = discovered.get(provider.id, [])
            total_files += len(files)
            sessions = cache.sessions_for(provider.id)
            plan = reconcile(files, sessions)
            evicted = apply_evictions(sessions, plan)
            if evicted:
                logger.debug("Evicted %d deleted %s sessions", evicted, provider.id)
            pending.extend((provider, ref) for ref in plan.to_reparse)
            per_provider_counts.append(f"{len(plan.to_reparse)} {provider.label}")

        total = len(pending)
        logger.info(
            "Global stats: %d to process (%s), %d cached",
            total, ", ".join(per_provider_counts), total_files - total,
        )

        self._emit(cache, is_complete=total == 0, processed=0, total=total)

        processed = 0
        if pending:
            self._set_phase(ScanPhase.REPARSING)
            for index, (provider, ref) in enumerate(pending, start=1):
                stored = self._reparse(cache, provider, ref)
                if stored:
                    processed += 1
                at_interval = stored and processed % self._progress_interval == 0
                if at_interval or index == total:
                    self._emit(cache, is_complete=False, processed=processed, total=total)
            self._set_phase(ScanPhase.SCANNING)

        cache.last_updated = int(time.time() * 1000)
        self._cache.save(cache)

        result = self._emit(cache, is_complete=True, processed=processed, total=total)
        logger.info(
            "Global stats complete: %d sessions, %d messages, $%.2f (%d processed, %d cached)",
            result.total_sessions, result.total_messages, result.total_cost_usd,
            processed, total_files - total,
        )
        self._set_phase(ScanPhase.DONE)
        return result

    def _reparse(self, cache: GlobalStatsCache, provider: ProviderSpec, ref: SessionFileRef) -> bool:
        """Parse one file into the cache. A failure leaves it uncached."""
        try:
            content = ref.path.read_text(encoding="utf-8", errors="replace")
            size = ref.path.stat().st_size
            stats = provider.parse(content, size)
        except FileNotFoundError:
            logger.debug("Session file vanished before reading: %s", ref.path)
            return False
        except Exception:
            logger.warning(
                "Failed to parse %s session: %s", provider.id, ref.session_key, exc_info=True,
            )
            return False

        stats.file_mtime_ms = ref.mtime_ms
        cache.sessions_for(provider.id)[ref.session_key] = stats
        self.last_reparsed.append(f"{provider.id}:{ref.session_key}")
        return True

    def _emit(self, cache: GlobalStatsCache, is_complete: bool, processed: int, total: int) -> GlobalAggregate:
        snapshot = build_snapshot(
            cache,
            self._providers,
            is_complete=is_complete,
            processed_count=processed,
            total_to_process=total,
            pricing_model=self._pricing_model,
        )
        self._last_snapshot = snapshot
        self.snapshot_ready.emit(snapshot)
        return snapshot

    def _set_phase(self, phase: ScanPhase):
        if self._phase != phase:
            self._phase = phase
            self.phase_changed.emit(phase.value)
