import logging

from ...api.errors import NetworkError
from ...api.repositories.products_repo import ProductsRepo
from ...api.repositories.receipts_repo import ReceiptsRepo
from ...api.repositories.suppliers_repo import SuppliersRepo
from ...utils.helpers import fmt_money
from ...utils.tasks import spawn
from ..resource_list.controller import ResourceListController
from ..resource_list.directives import ColumnKind, ColumnSpec
from .form import RECEIPT_SCHEMA, ReceiptFormController, ReceiptFormDialog

_log = logging.getLogger(__name__)

SUPPLIER_OPTIONS_LIMIT = 100


def _yes_no(v) -> str:
    return "Yes" if v else "No"


class ReceiptController(ResourceListController):
    title = "Receipts"
    repo_class = ReceiptsRepo
    schema = RECEIPT_SCHEMA
    can_delete = False
    columns = (
        ColumnSpec("id_recibo", "ID", ColumnKind.NUMBER),
        ColumnSpec("id_orden", "Order", ColumnKind.NUMBER),
        ColumnSpec("proveedor", "Supplier"),
        ColumnSpec("precio", "Total", ColumnKind.NUMBER, formatter=fmt_money),
        ColumnSpec("fecha_compra", "Purchased", ColumnKind.DATE),
        ColumnSpec("fecha_llegada", "Arrival", ColumnKind.DATE),
        ColumnSpec("recibido", "Received", formatter=_yes_no, searchable=False),
    )

    def make_form(self):
        return ReceiptFormController(self.schema, self.engine)

    def make_dialog(self, form):
        return ReceiptFormDialog(form, self.view, lookup=self._find_product)

    def dialog_ready(self, dlg):
        spawn(self._load_suppliers(dlg), on_error=self._on_task_error)

    async def _find_product(self, sku: str):
        return await ProductsRepo(self.transport).find_by_sku(sku, token=self.identity.get_token())

    async def _load_suppliers(self, dlg):
        try:
            page = await SuppliersRepo(self.transport).list_page(
                1, SUPPLIER_OPTIONS_LIMIT, token=self.identity.get_token()
            )
        except NetworkError as exc:
            _log.warning("Could not load suppliers: %s", exc)
            dlg.show_error("Could not load suppliers; try again later.")
            return
        dlg.set_suppliers(list(page.records))
