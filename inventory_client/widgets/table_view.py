from PySide6.QtCore import Qt
from PySide6.QtWidgets import QTableView


class TableView(QTableView):
    def __init__(self, parent=None):
        super().__init__(parent)
        # sorting is done by the list engine (three-state), not by Qt
        self.setSortingEnabled(False)
        self.setAlternatingRowColors(True)
        self.setSelectionBehavior(QTableView.SelectRows)
        self.setSelectionMode(QTableView.SingleSelection)
        self.setEditTriggers(QTableView.NoEditTriggers)
        header = self.horizontalHeader()
        header.setStretchLastSection(True)
        header.setSectionsClickable(True)
        self.verticalHeader().setVisible(False)

    def show_sort(self, column: int, ascending: bool | None):
        """Draw the header arrow; None hides it."""
        header = self.horizontalHeader()
        if ascending is None or column < 0:
            header.setSortIndicatorShown(False)
            return
        header.setSortIndicatorShown(True)
        header.setSortIndicator(column, Qt.AscendingOrder if ascending else Qt.DescendingOrder)

    def selected_row(self) -> int | None:
        sel = self.selectionModel()
        if sel is None:
            return None
        rows = sel.selectedRows()
        return rows[0].row() if rows else None
