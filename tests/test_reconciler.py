"""Tests for agent_session_stats.services.reconciler."""

from pathlib import Path

from agent_session_stats.services.reconciler import apply_evictions, reconcile
from agent_session_stats.types.stats import CachedSessionStats, SessionFileRef


def _ref(key: str, mtime: float) -> SessionFileRef:
    return SessionFileRef(path=Path(f"/tmp/{key}.jsonl"), session_key=key, mtime_ms=mtime)


def _cached(mtime: float) -> CachedSessionStats:
    return CachedSessionStats(message_count=1, file_mtime_ms=mtime)


class TestReconcile:
    def test_new_file_needs_reparse(self):
        plan = reconcile([_ref("a", 100.0)], {})
        assert [r.session_key for r in plan.to_reparse] == ["a"]
        assert plan.to_evict == []
        assert plan.reusable == []

    def test_unchanged_file_is_reusable(self):
        plan = reconcile([_ref("a", 100.0)], {"a": _cached(100.0)})
        assert plan.to_reparse == []
        assert plan.reusable == ["a"]

    def test_newer_mtime_needs_reparse(self):
        plan = reconcile([_ref("a", 100.5)], {"a": _cached(100.0)})
        assert [r.session_key for r in plan.to_reparse] == ["a"]

    def test_older_mtime_is_reusable(self):
        plan = reconcile([_ref("a", 90.0)], {"a": _cached(100.0)})
        assert plan.reusable == ["a"]

    def test_missing_file_is_evicted(self):
        cache = {"gone": _cached(1.0), "kept": _cached(1.0), "also-gone": _cached(1.0)}
        plan = reconcile([_ref("kept", 1.0)], cache)
        assert plan.to_evict == ["also-gone", "gone"]

    def test_reparse_preserves_discovery_order(self):
        files = [_ref("c", 1.0), _ref("a", 1.0), _ref("b", 1.0)]
        plan = reconcile(files, {})
        assert [r.session_key for r in plan.to_reparse] == ["c", "a", "b"]


class TestApplyEvictions:
    def test_removes_only_evicted_keys(self):
        cache = {"gone": _cached(1.0), "kept": _cached(1.0)}
        plan = reconcile([_ref("kept", 1.0)], cache)
        assert apply_evictions(cache, plan) == 1
        assert list(cache) == ["kept"]

    def test_nothing_to_evict(self):
        cache = {"kept": _cached(1.0)}
        plan = reconcile([_ref("kept", 1.0)], cache)
        assert apply_evictions(cache, plan) == 0
        assert list(cache) == ["kept"]
