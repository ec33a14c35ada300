from ...api.repositories.products_repo import ProductsRepo
from ...api.repositories.sales_repo import SalesRepo
from ...utils.helpers import fmt_money
from ..resource_list.controller import ResourceListController
from ..resource_list.directives import ColumnKind, ColumnSpec
from .form import SALE_SCHEMA, SaleFormDialog


class SaleController(ResourceListController):
    """
    Sales listed one row per folio. New sale orders are entered here;
    existing rows are not edited or deleted from the client.
    """

    title = "Sales"
    repo_class = SalesRepo
    schema = SALE_SCHEMA
    can_update = False
    can_delete = False
    columns = (
        ColumnSpec("id_venta", "ID", ColumnKind.NUMBER),
        ColumnSpec("id_orden", "Order"),
        ColumnSpec("id_folio", "Folio"),
        ColumnSpec("cliente", "Customer"),
        ColumnSpec("precio", "Price", ColumnKind.NUMBER, formatter=fmt_money),
        ColumnSpec("costo", "Cost", ColumnKind.NUMBER, formatter=fmt_money, searchable=False),
        ColumnSpec("fecha", "Date", ColumnKind.DATE),
    )

    def make_dialog(self, form):
        return SaleFormDialog(form, self.view, lookup=self._find_product)

    async def _find_product(self, sku: str):
        return await ProductsRepo(self.transport).find_by_sku(sku, token=self.identity.get_token())
