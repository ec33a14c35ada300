# inventory_client/api/repositories/suppliers_repo.py
from __future__ import annotations

from typing import Any, Mapping

from .base_repo import MutationMode, ResourceRepo


class SuppliersRepo(ResourceRepo):
    title = "Suppliers"
    path = "/api/proveedores"
    id_field = "id"

    _FIELD_MAP = {"name": "nombre", "city": "ciudad", "lead_time": "tiempo_envio"}

    def to_api(self, fields: Mapping[str, Any], mode: MutationMode) -> dict:
        return {dst: fields[src] for src, dst in self._FIELD_MAP.items() if src in fields}
