from ...api.repositories.suppliers_repo import SuppliersRepo
from ..forms.fields import BlankPolicy, FieldKind, FormField, FormSchema
from ..resource_list.controller import ResourceListController
from ..resource_list.directives import ColumnKind, ColumnSpec

SUPPLIER_SCHEMA = FormSchema(
    title="Supplier",
    fields=(
        FormField("name", "Name", required=True),
        FormField("city", "City"),
        # lead time in days; unparseable input is sent as null
        FormField("lead_time", "Lead time (days)", kind=FieldKind.INT, blank=BlankPolicy.NULL, min_value=0),
    ),
)


class SupplierController(ResourceListController):
    title = "Suppliers"
    repo_class = SuppliersRepo
    schema = SUPPLIER_SCHEMA
    columns = (
        ColumnSpec("id", "ID", ColumnKind.NUMBER),
        ColumnSpec("name", "Name"),
        ColumnSpec("city", "City"),
        ColumnSpec("lead_time", "Lead time (days)", ColumnKind.NUMBER),
    )
