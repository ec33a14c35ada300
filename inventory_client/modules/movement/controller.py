from ...api.repositories.movements_repo import MovementsRepo
from ..resource_list.controller import ResourceListController
from ..resource_list.directives import ColumnKind, ColumnSpec


class MovementController(ResourceListController):
    """Stock movements between locations (read-only history)."""

    title = "Movements"
    repo_class = MovementsRepo
    can_delete = False
    columns = (
        ColumnSpec("id_movimiento", "ID", ColumnKind.NUMBER),
        ColumnSpec("nombre_usuario", "User"),
        ColumnSpec("id_ubicacion_origen", "From", ColumnKind.NUMBER),
        ColumnSpec("id_ubicacion_destino", "To", ColumnKind.NUMBER),
        ColumnSpec("old_masterSKU", "Old SKU"),
        ColumnSpec("new_masterSKU", "New SKU"),
        ColumnSpec("cantidad", "Quantity", ColumnKind.NUMBER),
        ColumnSpec("fecha", "Date", ColumnKind.DATE),
    )
