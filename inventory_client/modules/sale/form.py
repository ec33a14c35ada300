import time

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QLineEdit, QPushButton, QTabWidget, QLabel,
)

from ...utils.helpers import today_str
from ..forms.controller import LineItemsEditor
from ..forms.fields import FieldKind, FormField, FormSchema
from ..forms.form import EntityFormDialog
from ..forms.line_items import LineItemsWidget


def new_folio_number() -> str:
    return f"FOL-{int(time.time() * 1000)}"


def check_folios(values) -> str | None:
    folios = values.get("folios") or []
    if not folios:
        return "Add at least one folio."
    for folio in folios:
        if not folio.get("productos"):
            number = folio.get("numero_folio")
            name = f"Folio {number}" if number else "Every folio"
            return f"{name} must have at least one product."
    return None


SALE_SCHEMA = FormSchema(
    title="Sale",
    fields=(
        FormField("id_orden", "Order number", required=True, required_message="Order number is required."),
        FormField("cliente", "Customer", required=True, required_message="Customer name is required."),
        FormField("fecha", "Date", kind=FieldKind.DATE, required=True, default=today_str),
        FormField("folios", "Folios", kind=FieldKind.LINES),
    ),
    checks=(check_folios,),
)


class SaleFormDialog(EntityFormDialog):
    """Sale order: header fields + one tab per folio, each with its product lines."""

    def __init__(self, form, parent=None, *, lookup=None, options=None):
        self._lookup = lookup
        self._folios: list[tuple[QLineEdit, LineItemsEditor]] = []
        super().__init__(form, parent, options=options)
        self.resize(720, 560)

    def build_extra(self, root: QVBoxLayout) -> None:
        bar = QHBoxLayout()
        bar.addWidget(QLabel("Folios"))
        bar.addStretch(1)
        self.btn_add_folio = QPushButton("Add folio")
        self.btn_remove_folio = QPushButton("Remove folio")
        bar.addWidget(self.btn_add_folio)
        bar.addWidget(self.btn_remove_folio)
        root.addLayout(bar)

        self.tabs = QTabWidget()
        root.addWidget(self.tabs, 1)
        self.btn_add_folio.clicked.connect(lambda: self.add_folio())
        self.btn_remove_folio.clicked.connect(self.remove_current_folio)

        for folio in self.form.values.get("folios") or []:
            self.add_folio(folio.get("numero_folio"), folio.get("productos"))

    def add_folio(self, number: str | None = None, products=None) -> LineItemsEditor:
        page = QWidget()
        lay = QVBoxLayout(page)
        top = QFormLayout()
        edt_number = QLineEdit(number or new_folio_number())
        top.addRow("Folio number", edt_number)
        lay.addLayout(top)

        editor = LineItemsEditor(self._lookup, amount_key="precio", source_field="price", lines=products)
        items = LineItemsWidget(editor, amount_label="Price")
        items.errorRaised.connect(self.show_error)
        items.authFailed.connect(self._failed)
        lay.addWidget(items, 1)

        self._folios.append((edt_number, editor))
        self.tabs.addTab(page, edt_number.text())
        edt_number.textChanged.connect(lambda text, p=page: self.tabs.setTabText(self.tabs.indexOf(p), text))
        self.tabs.setCurrentWidget(page)
        return editor

    def remove_current_folio(self):
        idx = self.tabs.currentIndex()
        if idx < 0:
            return
        self.tabs.removeTab(idx)
        del self._folios[idx]

    def collect_extra(self) -> None:
        self.form.set_value("folios", [
            {"numero_folio": edt.text().strip(), "productos": editor.snapshot()}
            for edt, editor in self._folios
        ])
