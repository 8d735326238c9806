"""Tests for agent_session_stats.models.provider_stats_model."""

import pytest
from PySide6.QtCore import Qt

from agent_session_stats.models.provider_stats_model import ProviderStatsModel
from agent_session_stats.types.stats import GlobalAggregate, ProviderAggregate


def _snapshot() -> GlobalAggregate:
    return GlobalAggregate(
        total_sessions=5,
        by_provider={
            "claude-code": ProviderAggregate(
                session_count=3, message_count=40, input_tokens=1000, output_tokens=200,
                cost_usd=0.75, has_cost_data=True, size_bytes=4096,
            ),
            "codex": ProviderAggregate(session_count=2, message_count=6, input_tokens=50, output_tokens=9),
        },
    )


class TestProviderStatsModel:
    def test_empty_model(self, qapp):
        assert ProviderStatsModel().rowCount() == 0

    def test_set_snapshot(self, qapp):
        model = ProviderStatsModel()
        model.set_snapshot(_snapshot())
        assert model.rowCount() == 2

    def test_data_roles(self, qapp):
        model = ProviderStatsModel()
        model.set_snapshot(_snapshot())
        idx = model.index(0, 0)
        assert model.data(idx, ProviderStatsModel.ProviderIdRole) == "claude-code"
        assert model.data(idx, ProviderStatsModel.ProviderLabelRole) == "Claude Code"
        assert model.data(idx, ProviderStatsModel.SessionCountRole) == 3
        assert model.data(idx, ProviderStatsModel.MessageCountRole) == 40
        assert model.data(idx, ProviderStatsModel.InputTokensRole) == 1000
        assert model.data(idx, ProviderStatsModel.OutputTokensRole) == 200
        assert model.data(idx, ProviderStatsModel.CostUsdRole) == pytest.approx(0.75)
        assert model.data(idx, ProviderStatsModel.HasCostDataRole) is True
        assert model.data(idx, ProviderStatsModel.SizeBytesRole) == 4096
        assert model.data(idx, Qt.DisplayRole) == "Claude Code"

    def test_snapshot_replaces_rows(self, qapp):
        model = ProviderStatsModel()
        model.set_snapshot(_snapshot())
        model.set_snapshot(GlobalAggregate())
        assert model.rowCount() == 0

    def test_invalid_index(self, qapp):
        model = ProviderStatsModel()
        assert model.data(model.index(5, 0), ProviderStatsModel.ProviderIdRole) is None

    def test_get_provider_id(self, qapp):
        model = ProviderStatsModel()
        model.set_snapshot(_snapshot())
        assert model.get_provider_id(1) == "codex"
        assert model.get_provider_id(9) == ""

    def test_role_names(self, qapp):
        names = ProviderStatsModel().roleNames()
        assert b"providerId" in names.values()
        assert b"costUsd" in names.values()
