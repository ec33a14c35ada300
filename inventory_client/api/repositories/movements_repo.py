# inventory_client/api/repositories/movements_repo.py
from .base_repo import ResourceRepo


class MovementsRepo(ResourceRepo):
    """Stock movements between locations. The backend exposes them read-only."""

    title = "Movements"
    path = "/api/misc"
    list_params = {"type": "movimientos"}
    id_field = "id_movimiento"
    read_only = True
