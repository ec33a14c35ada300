import logging
from pathlib import Path
from typing import Any, Iterable

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QDialog, QFormLayout, QLineEdit, QDialogButtonBox, QVBoxLayout, QHBoxLayout,
    QComboBox, QCheckBox, QLabel, QPushButton, QFileDialog, QWidget,
)

from ...api.errors import AuthError, InventoryClientError
from ...api.repositories.base_repo import MutationMode
from ...utils.tasks import spawn
from .controller import EntityFormController
from .fields import FieldKind, FormField

_log = logging.getLogger(__name__)


class EntityFormDialog(QDialog):
    """
    Generic create/edit dialog driven by a FormSchema.

    Widgets are pushed into the EntityFormController on OK; the dialog only
    closes once the save succeeded. Validation and server errors are shown
    inline and every entered value is kept.
    """

    # emitted when the save hit an expired session
    authFailed = Signal(object)

    def __init__(self, form: EntityFormController, parent=None, *, options: dict | None = None):
        super().__init__(parent)
        self.form = form
        self.setModal(True)
        verb = "Edit" if form.mode is MutationMode.UPDATE else "New"
        self.setWindowTitle(f"{verb} {form.schema.title}")

        self._widgets: dict[str, QWidget] = {}
        self._attachment_labels: dict[str, QLabel] = {}
        options = options or {}

        root = QVBoxLayout(self)
        lay = QFormLayout()
        for f in form.schema.fields:
            if f.kind is FieldKind.LINES:
                continue
            w = self._make_widget(f, options.get(f.name))
            self._widgets[f.name] = w
            lay.addRow(f.label + ("*" if f.required else ""), w)
        root.addLayout(lay)

        self.build_extra(root)

        self.lbl_error = QLabel("")
        self.lbl_error.setObjectName("formError")
        self.lbl_error.setStyleSheet("color: #b00020;")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setVisible(False)
        root.addWidget(self.lbl_error)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel, parent=self)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        root.addWidget(self.buttons)

    # ---------------- widgets ----------------

    def build_extra(self, root: QVBoxLayout) -> None:
        """Hook for dialogs with line items."""

    def _make_widget(self, f: FormField, items: Iterable | None) -> QWidget:
        value = self.form.values.get(f.name)
        if f.kind in (FieldKind.CHOICE, FieldKind.RELATED):
            cmb = QComboBox()
            self._fill_combo(cmb, f, items, value)
            return cmb
        if f.kind is FieldKind.BOOL:
            chk = QCheckBox()
            chk.setChecked(bool(value))
            return chk
        if f.kind is FieldKind.ATTACHMENT:
            host = QWidget()
            row = QHBoxLayout(host)
            row.setContentsMargins(0, 0, 0, 0)
            btn = QPushButton("Choose file…")
            lbl = QLabel("Attached" if value else "No file")
            btn.clicked.connect(lambda _=False, name=f.name: self._pick_file(name))
            row.addWidget(btn)
            row.addWidget(lbl, 1)
            self._attachment_labels[f.name] = lbl
            return host
        edt = QLineEdit()
        if value is not None:
            edt.setText(str(value))
        if f.kind in (FieldKind.INT, FieldKind.FLOAT):
            edt.setPlaceholderText("0")
        elif f.kind is FieldKind.DATE:
            edt.setPlaceholderText("YYYY-MM-DD")
        return edt

    def _fill_combo(self, cmb: QComboBox, f: FormField, items, value):
        cmb.clear()
        if not f.required or f.kind is FieldKind.RELATED:
            cmb.addItem("—", None)
        if items is None:
            items = [(c, c) for c in f.choices]
        for label, data in items:
            cmb.addItem(str(label), data)
        idx = cmb.findData(value)
        if idx < 0 and value is not None:
            # current value not among the options yet (e.g. still loading)
            cmb.addItem(str(value), value)
            idx = cmb.count() - 1
        cmb.setCurrentIndex(max(idx, 0))

    def set_options(self, name: str, items):
        """Replace the options of a choice/related field (loaded asynchronously)."""
        cmb = self._widgets.get(name)
        if isinstance(cmb, QComboBox):
            current = cmb.currentData()
            self._fill_combo(cmb, self.form.schema.get(name), list(items), current)

    def _pick_file(self, name: str):
        f = self.form.schema.get(name)
        patterns = " ".join(f"*{a}" for a in f.accept) or "*"
        path, _ = QFileDialog.getOpenFileName(self, f"Choose {f.label}", "", f"Files ({patterns})")
        if not path:
            return
        lbl = self._attachment_labels[name]
        lbl.setText("Reading…")

        def _done(payload):
            if payload is not None:
                lbl.setText(Path(path).name)

        def _failed(exc):
            lbl.setText("No file")
            self.show_error(str(exc))

        spawn(self.form.load_attachment(name, path), on_done=_done, on_error=_failed)

    # ---------------- values ----------------

    def widget_value(self, name: str) -> Any:
        w = self._widgets[name]
        if isinstance(w, QComboBox):
            return w.currentData()
        if isinstance(w, QCheckBox):
            return w.isChecked()
        if isinstance(w, QLineEdit):
            return w.text()
        return self.form.values.get(name)

    def collect(self) -> None:
        for name in self._widgets:
            if self.form.schema.get(name).kind is FieldKind.ATTACHMENT:
                continue
            self.form.set_value(name, self.widget_value(name))
        self.collect_extra()

    def collect_extra(self) -> None:
        """Hook: push line items into the form values."""

    def show_error(self, message: str | None):
        self.lbl_error.setText(message or "")
        self.lbl_error.setVisible(bool(message))

    def _set_busy(self, busy: bool):
        self.buttons.button(QDialogButtonBox.Ok).setEnabled(not busy)

    # ---------------- submit ----------------

    def accept(self):
        if self.form.is_submitting:
            return
        self.collect()
        msg = self.form.validate()
        if msg:
            self.show_error(msg)
            w = self._widgets.get(self.form.error_field or "")
            if w is not None:
                w.setFocus()
            return
        self.show_error(None)
        self._set_busy(True)
        spawn(self.form.submit(), on_done=self._saved, on_error=self._failed)

    def _saved(self, ok):
        self._set_busy(False)
        if ok:
            super().accept()

    def _failed(self, exc: BaseException):
        self._set_busy(False)
        if isinstance(exc, AuthError):
            self.reject()
            self.authFailed.emit(exc)
            return
        if isinstance(exc, InventoryClientError):
            self.show_error(self.form.error or str(exc))
            return
        _log.error("Unexpected error while saving", exc_info=exc)
        self.show_error(str(exc))

    def reject(self):
        self.form.close()
        super().reject()
