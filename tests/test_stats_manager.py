"""Tests for agent_session_stats.services.stats_manager."""

from unittest.mock import patch

import pytest

from agent_session_stats.services.stats_engine import GlobalStatsEngine
from agent_session_stats.services.stats_manager import StatsManager
from helpers import claude_line, codex_message, wait_for_worker, write_claude_session, write_codex_session


@pytest.fixture
def manager(qapp, roots, stats_cache, claude_root, codex_root):
    write_claude_session(claude_root, "proj", "s1", [claude_line("user"), claude_line("assistant", 10, 5)])
    write_codex_session(codex_root, "2025/02/03", "r1", [codex_message("user")])
    m = StatsManager(GlobalStatsEngine(roots=roots, cache=stats_cache))
    yield m
    m.cleanup()


class TestRefresh:
    def test_refresh_delivers_final_snapshot(self, manager):
        finished = []
        updates = []
        manager.stats_finished.connect(finished.append)
        manager.stats_updated.connect(updates.append)

        manager.refresh()
        assert manager.loading is True
        wait_for_worker(manager)

        assert manager.loading is False
        assert len(finished) == 1
        assert finished[0].is_complete is True
        assert finished[0].total_sessions == 2
        assert updates[-1].is_complete is True
        assert all(not u.is_complete for u in updates[:-1])

    def test_stats_property_exposes_latest(self, manager):
        assert manager.stats == {}
        manager.refresh()
        wait_for_worker(manager)
        assert manager.stats["totalSessions"] == 2
        assert manager.stats["isComplete"] is True
        assert manager.latest.total_messages == 3

    def test_requests_during_run_coalesce(self, manager):
        finished = []
        manager.stats_finished.connect(finished.append)

        manager.refresh()
        manager.refresh()
        manager.refresh()
        wait_for_worker(manager)

        assert len(finished) == 2
        assert manager.loading is False

    def test_failed_run_clears_loading(self, manager):
        finished = []
        manager.stats_finished.connect(finished.append)

        with patch.object(manager.engine, "compute_global_stats", side_effect=RuntimeError("boom")):
            manager.refresh()
            wait_for_worker(manager)

        assert finished == []
        assert manager.loading is False

    def test_loading_changed_signal(self, manager):
        states = []
        manager.loading_changed.connect(lambda: states.append(manager.loading))
        manager.refresh()
        wait_for_worker(manager)
        assert states == [True, False]
