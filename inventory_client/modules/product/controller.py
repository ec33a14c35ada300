import logging

from ...api.errors import NetworkError
from ...api.repositories.products_repo import ProductsRepo
from ...api.repositories.suppliers_repo import SuppliersRepo
from ...utils.helpers import fmt_money
from ...utils.tasks import spawn
from ..resource_list.controller import ResourceListController
from ..resource_list.directives import ColumnKind, ColumnSpec
from .form import PRODUCT_SCHEMA

_log = logging.getLogger(__name__)

# how many suppliers the supplier picker offers
SUPPLIER_OPTIONS_LIMIT = 100


class ProductController(ResourceListController):
    title = "Products"
    repo_class = ProductsRepo
    schema = PRODUCT_SCHEMA
    columns = (
        ColumnSpec("sku", "SKU"),
        ColumnSpec("name", "Name"),
        ColumnSpec("category", "Category"),
        ColumnSpec("supplier", "Supplier", path="supplier.name"),
        ColumnSpec("stock", "Stock", ColumnKind.NUMBER),
        ColumnSpec("price", "Price", ColumnKind.NUMBER, formatter=fmt_money),
        ColumnSpec("cost", "Cost", ColumnKind.NUMBER, formatter=fmt_money),
        ColumnSpec("weight_kg", "Weight (kg)", ColumnKind.NUMBER, searchable=False),
    )

    def dialog_ready(self, dlg):
        spawn(self._load_suppliers(dlg), on_error=self._on_task_error)

    async def _load_suppliers(self, dlg):
        suppliers = SuppliersRepo(self.transport)
        try:
            page = await suppliers.list_page(
                1, SUPPLIER_OPTIONS_LIMIT, token=self.identity.get_token()
            )
        except NetworkError as exc:
            _log.warning("Could not load suppliers: %s", exc)
            dlg.show_error("Could not load suppliers; try again later.")
            return
        dlg.set_options("supplier.id", [(s.get("name") or f"#{s.get('id')}", s.get("id")) for s in page.records])
