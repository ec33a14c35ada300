from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QPushButton, QLabel, QTableWidget,
    QTableWidgetItem, QHeaderView, QAbstractItemView,
)

from ...api.errors import AuthError, ValidationError
from ...utils.helpers import fmt_money
from ...utils.tasks import spawn
from .controller import LineItemsEditor


class LineItemsWidget(QWidget):
    """SKU entry + editable table of product lines + running total."""

    errorRaised = Signal(str)
    authFailed = Signal(object)
    changed = Signal()

    COLS = ("Name", "SKU", "Qty")

    def __init__(self, editor: LineItemsEditor, amount_label: str = "Price", parent=None):
        super().__init__(parent)
        self.editor = editor
        self._syncing = False

        lay = QVBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)

        row = QHBoxLayout()
        self.edt_sku = QLineEdit()
        self.edt_sku.setPlaceholderText("Scan or type a SKU and press Enter")
        self.btn_add_sku = QPushButton("Add")
        self.btn_add_blank = QPushButton("Blank line")
        self.btn_remove = QPushButton("Remove")
        row.addWidget(self.edt_sku, 2)
        row.addWidget(self.btn_add_sku)
        row.addWidget(self.btn_add_blank)
        row.addWidget(self.btn_remove)
        lay.addLayout(row)

        self.table = QTableWidget(0, len(self.COLS) + 1)
        self.table.setHorizontalHeaderLabels(list(self.COLS) + [amount_label])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SingleSelection)
        lay.addWidget(self.table, 1)

        self.lbl_total = QLabel("")
        lay.addWidget(self.lbl_total)

        self.edt_sku.returnPressed.connect(self._add_sku)
        self.btn_add_sku.clicked.connect(self._add_sku)
        self.btn_add_blank.clicked.connect(self._add_blank)
        self.btn_remove.clicked.connect(self._remove)
        self.table.itemChanged.connect(self._on_item_changed)
        self.refresh()

    def _keys(self):
        return ("nombre", "sku", "cantidad", self.editor.amount_key)

    def refresh(self):
        self._syncing = True
        try:
            self.table.setRowCount(len(self.editor.lines))
            for r, line in enumerate(self.editor.lines):
                for c, key in enumerate(self._keys()):
                    v = line.get(key)
                    self.table.setItem(r, c, QTableWidgetItem("" if v is None else str(v)))
        finally:
            self._syncing = False
        self.lbl_total.setText(f"Total: {fmt_money(self.editor.total())}")
        self.changed.emit()

    def _on_item_changed(self, item: QTableWidgetItem):
        if self._syncing:
            return
        key = self._keys()[item.column()]
        self.editor.update(item.row(), **{key: item.text().strip()})
        self.refresh()

    def _add_sku(self):
        sku = self.edt_sku.text().strip()

        def _done(_line):
            self.edt_sku.clear()
            self.refresh()

        def _failed(exc):
            if isinstance(exc, AuthError):
                self.authFailed.emit(exc)
            elif isinstance(exc, ValidationError):
                self.errorRaised.emit(exc.message)
            else:
                self.errorRaised.emit(str(exc))

        spawn(self.editor.add_by_sku(sku), on_done=_done, on_error=_failed)

    def _add_blank(self):
        self.editor.add_blank()
        self.refresh()

    def _remove(self):
        rows = self.table.selectionModel().selectedRows()
        if not rows:
            return
        self.editor.remove(rows[0].row())
        self.refresh()
