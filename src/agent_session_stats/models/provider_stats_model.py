"""QAbstractListModel for the per-provider usage breakdown."""

from PySide6.QtCore import QAbstractListModel, QModelIndex, Qt, Slot

from agent_session_stats.services.providers import get_provider
from agent_session_stats.types.stats import GlobalAggregate, ProviderAggregate


class ProviderStatsModel(QAbstractListModel):
    """Exposes one row per provider with sessions in the latest snapshot."""

    ProviderIdRole = Qt.UserRole + 1
    ProviderLabelRole = Qt.UserRole + 2
    SessionCountRole = Qt.UserRole + 3
    MessageCountRole = Qt.UserRole + 4
    InputTokensRole = Qt.UserRole + 5
    OutputTokensRole = Qt.UserRole + 6
    CostUsdRole = Qt.UserRole + 7
    HasCostDataRole = Qt.UserRole + 8
    SizeBytesRole = Qt.UserRole + 9

    def __init__(self, parent=None):
        super().__init__(parent)
        self._rows: list[tuple[str, ProviderAggregate]] = []

    def roleNames(self):
        return {
            self.ProviderIdRole: b"providerId",
            self.ProviderLabelRole: b"providerLabel",
            self.SessionCountRole: b"sessionCount",
            self.MessageCountRole: b"messageCount",
            self.InputTokensRole: b"inputTokens",
            self.OutputTokensRole: b"outputTokens",
            self.CostUsdRole: b"costUsd",
            self.HasCostDataRole: b"hasCostData",
            self.SizeBytesRole: b"sizeBytes",
        }

    def rowCount(self, parent=QModelIndex()):
        return len(self._rows)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid() or index.row() >= len(self._rows):
            return None

        provider_id, agg = self._rows[index.row()]

        if role == self.ProviderIdRole:
            return provider_id
        elif role in (self.ProviderLabelRole, Qt.DisplayRole):
            return _label(provider_id)
        elif role == self.SessionCountRole:
            return agg.session_count
        elif role == self.MessageCountRole:
            return agg.message_count
        elif role == self.InputTokensRole:
            return agg.input_tokens
        elif role == self.OutputTokensRole:
            return agg.output_tokens
        elif role == self.CostUsdRole:
            return agg.cost_usd
        elif role == self.HasCostDataRole:
            return agg.has_cost_data
        elif role == self.SizeBytesRole:
            return agg.size_bytes
        return None

    @Slot(object)
    def set_snapshot(self, snapshot: GlobalAggregate):
        """Replace all rows with the snapshot's provider breakdown."""
        self.beginResetModel()
        self._rows = list(snapshot.by_provider.items())
        self.endResetModel()

    @Slot(int, result=str)
    def get_provider_id(self, index: int) -> str:
        if 0 <= index < len(self._rows):
            return self._rows[index][0]
        return ""


def _label(provider_id: str) -> str:
    try:
        return get_provider(provider_id).label
    except KeyError:
        return provider_id
