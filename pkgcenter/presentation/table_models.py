from PySide6.QtCore import QAbstractTableModel, QModelIndex, QPersistentModelIndex, Qt

from pkgcenter.core.package_types import PackageRecord


class PackageTableModel(QAbstractTableModel):
    """Lightweight table model backed by PackageRecord rows."""

    _HEADERS = ("Name", "Version", "Repository", "Installed", "Description")

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._rows: list[PackageRecord] = []

    def rowCount(
        self,
        /,
        parent: QModelIndex | QPersistentModelIndex = QModelIndex(),
    ) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(
        self,
        /,
        parent: QModelIndex | QPersistentModelIndex = QModelIndex(),
    ) -> int:
        if parent.isValid():
            return 0
        return len(self._HEADERS)

    def data(
        self,
        index: QModelIndex | QPersistentModelIndex,
        /,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> object | None:
        if not index.isValid():
            return None
        if role not in (Qt.ItemDataRole.DisplayRole, Qt.ItemDataRole.EditRole):
            return None

        row = self._rows[index.row()]
        column = index.column()
        if column == 0:
            return row.name
        if column == 1:
            return row.version
        if column == 2:
            return row.repository
        if column == 3:
            return "yes" if row.installed else ""
        if column == 4:
            return row.description
        return None

    def headerData(
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation != Qt.Orientation.Horizontal:
            return None
        if 0 <= section < len(self._HEADERS):
            return self._HEADERS[section]
        return None

    def set_records(self, rows: list[PackageRecord]) -> None:
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def record_at(self, row: int) -> PackageRecord | None:
        if 0 <= row < len(self._rows):
            return self._rows[row]
        return None

    def installed_count(self) -> int:
        return sum(1 for r in self._rows if r.installed)
