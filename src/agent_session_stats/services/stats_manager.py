"""Runs global stats aggregation off the GUI thread."""

import logging
import time

from PySide6.QtCore import QObject, Signal, Slot, Property, QThread, QCoreApplication

from agent_session_stats.services.stats_engine import GlobalStatsEngine
from agent_session_stats.types.stats import GlobalAggregate

logger = logging.getLogger(__name__)


class _StatsWorker(QThread):
    """Background thread running one aggregation pass."""

    done = Signal(object)  # GlobalAggregate or None on failure

    def __init__(self, engine: GlobalStatsEngine, parent=None):
        super().__init__(parent)
        self._engine = engine

    def run(self):
        try:
            result = self._engine.compute_global_stats()
        except Exception:
            logger.exception("Global stats run failed")
            result = None
        self.done.emit(result)


class StatsManager(QObject):
    """Host-facing entry point for global stats.

    ``refresh`` starts a background run. Requests made while a run is in
    flight are coalesced into a single follow-up run.
    """

    stats_updated = Signal(object)   # GlobalAggregate, interim and final
    stats_finished = Signal(object)  # final GlobalAggregate
    loading_changed = Signal()

    def __init__(self, engine: GlobalStatsEngine | None = None, parent=None):
        super().__init__(parent)
        self._engine = engine if engine is not None else GlobalStatsEngine()
        self._engine.snapshot_ready.connect(self._on_snapshot)
        self._worker: _StatsWorker | None = None
        self._pending = False
        self._loading = False
        self._latest: GlobalAggregate | None = None

    def _get_loading(self) -> bool:
        return self._loading

    def _set_loading(self, value: bool):
        if self._loading != value:
            self._loading = value
            self.loading_changed.emit()

    loading = Property(bool, _get_loading, notify=loading_changed)

    def _get_stats(self) -> dict:
        return self._latest.to_dict() if self._latest else {}

    stats = Property("QVariantMap", _get_stats, notify=stats_updated)

    @property
    def engine(self) -> GlobalStatsEngine:
        return self._engine

    @property
    def latest(self) -> GlobalAggregate | None:
        return self._latest

    @Slot()
    def refresh(self):
        """Start a stats run, or queue one if a run is already active."""
        if self._worker is not None:
            self._pending = True
            return

        self._set_loading(True)
        worker = _StatsWorker(self._engine, self)
        worker.done.connect(self._on_worker_done)
        worker.finished.connect(worker.deleteLater)
        self._worker = worker
        worker.start()

    def wait_for_idle(self, timeout_ms: int = 30000) -> bool:
        """Block, processing events, until no run is active or pending."""
        deadline = time.monotonic() + timeout_ms / 1000
        while self._worker is not None:
            if time.monotonic() >= deadline:
                return False
            self._worker.wait(50)
            QCoreApplication.processEvents()
        return True

    def _on_snapshot(self, snapshot: GlobalAggregate):
        self._latest = snapshot
        self.stats_updated.emit(snapshot)

    def _on_worker_done(self, result):
        if self._worker is not None:
            self._worker.wait()
        self._worker = None
        if result is not None:
            self.stats_finished.emit(result)

        if self._pending:
            self._pending = False
            self.refresh()
            return
        self._set_loading(False)

    def cleanup(self):
        """Wait for any in-flight run to finish."""
        self._pending = False
        if self._worker is not None and self._worker.isRunning():
            self._worker.wait(5000)
