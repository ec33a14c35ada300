from PySide6.QtWidgets import QVBoxLayout, QLabel

from ...utils.helpers import today_str
from ..forms.controller import EntityFormController, LineItemsEditor, check_lines
from ..forms.fields import FieldKind, FormField, FormSchema
from ..forms.form import EntityFormDialog
from ..forms.line_items import LineItemsWidget


def check_receipt_lines(values) -> str | None:
    lines = values.get("productos") or []
    if not lines:
        return "Add at least one product."
    return check_lines(lines, amount_key="costo_por_articulo", amount_label="cost")


RECEIPT_SCHEMA = FormSchema(
    title="Receipt",
    fields=(
        FormField("orden", "Order number", required=True, seed_path="id_orden",
                  required_message="Order number is required."),
        FormField("proveedor_id", "Supplier", kind=FieldKind.RELATED, required=True,
                  required_message="Select a supplier."),
        FormField("fecha_compra", "Purchase date", kind=FieldKind.DATE, required=True, default=today_str),
        FormField("eta", "Expected arrival", kind=FieldKind.DATE, seed_path="fecha_llegada"),
        FormField("productos", "Products", kind=FieldKind.LINES),
        FormField("pdf", "Invoice PDF", kind=FieldKind.ATTACHMENT, accept=(".pdf",)),
    ),
    checks=(check_receipt_lines,),
)


class ReceiptFormController(EntityFormController):
    """
    Receipts store the supplier by name, so the picked supplier id is
    resolved against the loaded options when serializing.
    """

    def __init__(self, schema, engine):
        super().__init__(schema, engine)
        self.supplier_names: dict = {}
        self.seed_supplier_name: str | None = None

    def open(self, mode, seed=None):
        super().open(mode, seed)
        self.seed_supplier_name = (seed or {}).get("proveedor") or None

    def serialize(self) -> dict:
        out = super().serialize()
        if not out.get("eta"):
            out["eta"] = out.get("fecha_compra")
        out["proveedor_name"] = self.supplier_names.get(out.get("proveedor_id"), self.seed_supplier_name)
        return out


class ReceiptFormDialog(EntityFormDialog):
    def __init__(self, form, parent=None, *, lookup=None, options=None):
        self.editor = LineItemsEditor(
            lookup, amount_key="costo_por_articulo", source_field="cost",
            lines=form.values.get("productos"),
        )
        super().__init__(form, parent, options=options)
        self.resize(680, 560)

    def build_extra(self, root: QVBoxLayout) -> None:
        root.addWidget(QLabel("Products"))
        self.items = LineItemsWidget(self.editor, amount_label="Unit cost")
        self.items.errorRaised.connect(self.show_error)
        self.items.authFailed.connect(self._failed)
        root.addWidget(self.items, 1)

    def set_suppliers(self, suppliers: list[dict]):
        self.form.supplier_names = {s.get("id"): s.get("name") for s in suppliers}
        self.set_options("proveedor_id", [(s.get("name") or f"#{s.get('id')}", s.get("id")) for s in suppliers])
        wanted = self.form.seed_supplier_name
        cmb = self._widgets["proveedor_id"]
        if wanted and cmb.currentData() is None:
            idx = cmb.findText(wanted)
            if idx >= 0:
                cmb.setCurrentIndex(idx)

    def collect_extra(self) -> None:
        self.form.set_value("productos", self.editor.snapshot())
