from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from .directives import ColumnKind, ColumnSpec


class ResourceTableModel(QAbstractTableModel):
    """Read-only table over the engine's derived view."""

    def __init__(self, columns: list[ColumnSpec], rows: list[dict] | None = None):
        super().__init__()
        self._columns = list(columns)
        self._rows = list(rows or [])

    # Qt model basics
    def rowCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent=QModelIndex()):
        return 0 if parent.isValid() else len(self._columns)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        col = self._columns[index.column()]
        rec = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            return col.text(rec)
        if role == Qt.TextAlignmentRole and col.kind is ColumnKind.NUMBER:
            return int(Qt.AlignRight | Qt.AlignVCenter)
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self._columns[section].header
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> dict:
        return self._rows[row]

    def column(self, section: int) -> ColumnSpec:
        return self._columns[section]

    def index_of(self, key: str) -> int:
        for i, c in enumerate(self._columns):
            if c.key == key:
                return i
        return -1

    def replace(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()
