from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel, QComboBox, QStackedWidget,
)
from PySide6.QtCore import Qt

from ...constants import MSG_EMPTY, MSG_LOADING, MSG_NO_MATCH, QUICK_FILTER
from ...utils.ui_helpers import wrap_center
from ...widgets.table_view import TableView
from .state import ViewState, ViewStatus


class ResourceListView(QWidget):
    # stack pages
    PAGE_LOADING, PAGE_ERROR, PAGE_EMPTY, PAGE_TABLE = range(4)

    def __init__(self, columns, title: str = "", parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        # Top row: actions + server search
        row = QHBoxLayout()
        self.btn_add = QPushButton("Add")
        self.btn_edit = QPushButton("Edit")
        self.btn_del = QPushButton("Delete")
        row.addWidget(self.btn_add)
        row.addWidget(self.btn_edit)
        row.addWidget(self.btn_del)
        row.addStretch(1)

        self.search = QLineEdit()
        self.search.setPlaceholderText(f"Search {title.lower()}…" if title else "Search…")
        self.search.setClearButtonEnabled(True)
        row.addWidget(QLabel("Search:"))
        row.addWidget(self.search, 2)
        layout.addLayout(row)

        # Second row: local filter on the loaded page
        frow = QHBoxLayout()
        self.filter_field = QComboBox()
        self.filter_field.addItem("All columns", QUICK_FILTER)
        for c in columns:
            if c.searchable:
                self.filter_field.addItem(c.header, c.key)
        self.filter_text = QLineEdit()
        self.filter_text.setPlaceholderText("Filter this page…")
        self.btn_clear = QPushButton("Clear filters")
        frow.addWidget(QLabel("Filter:"))
        frow.addWidget(self.filter_field)
        frow.addWidget(self.filter_text, 2)
        frow.addWidget(self.btn_clear)
        layout.addLayout(frow)

        # Body: exactly one of loading / error / empty / table
        self.body = QStackedWidget()
        self.lbl_loading = QLabel(MSG_LOADING)
        self.body.addWidget(wrap_center(self.lbl_loading))

        err = QWidget()
        err_lay = QVBoxLayout(err)
        err_lay.addStretch(1)
        self.lbl_error = QLabel("")
        self.lbl_error.setObjectName("errorBanner")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setAlignment(Qt.AlignCenter)
        self.btn_retry = QPushButton("Retry")
        err_lay.addWidget(self.lbl_error)
        err_lay.addWidget(self.btn_retry, 0, Qt.AlignCenter)
        err_lay.addStretch(1)
        self.body.addWidget(err)

        self.lbl_empty = QLabel(MSG_EMPTY)
        self.body.addWidget(wrap_center(self.lbl_empty))

        self.table = TableView()
        self.body.addWidget(self.table)
        layout.addWidget(self.body, 1)

        # Pager
        prow = QHBoxLayout()
        prow.addStretch(1)
        self.btn_prev = QPushButton("‹ Previous")
        self.lbl_page = QLabel("")
        self.btn_next = QPushButton("Next ›")
        prow.addWidget(self.btn_prev)
        prow.addWidget(self.lbl_page)
        prow.addWidget(self.btn_next)
        layout.addLayout(prow)

        self.render(ViewState.loading())

    def render(self, state: ViewState, *, filtered: bool = False):
        if state.status is ViewStatus.LOADING:
            self.body.setCurrentIndex(self.PAGE_LOADING)
        elif state.status is ViewStatus.ERROR:
            self.lbl_error.setText(state.message or "")
            self.body.setCurrentIndex(self.PAGE_ERROR)
        elif state.is_empty:
            self.lbl_empty.setText(MSG_NO_MATCH if filtered else MSG_EMPTY)
            self.body.setCurrentIndex(self.PAGE_EMPTY)
        else:
            self.body.setCurrentIndex(self.PAGE_TABLE)

    def set_pager(self, page: int, total_pages: int, total: int):
        if total_pages:
            self.lbl_page.setText(f"Page {page} of {total_pages} ({total} records)")
        else:
            self.lbl_page.setText("")
        self.btn_prev.setEnabled(page > 1)
        self.btn_next.setEnabled(page < total_pages)
