# inventory_client/api/repositories/products_repo.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from ...utils.helpers import get_path
from .base_repo import MutationMode, ResourceRepo

# display field -> backend write field
_FIELD_MAP = (
    ("sku", "master_sku"),
    ("name", "nombre_producto"),
    ("photo", "foto"),
    ("dimensions_cm.largo", "largo_cm"),
    ("dimensions_cm.ancho", "ancho_cm"),
    ("dimensions_cm.alto", "alto_cm"),
    ("weight_kg", "peso_kg"),
    ("stock", "existencias"),
    ("price", "precio"),
    ("cost", "costo"),
    ("supplier.id", "id_proveedor"),
    ("category", "categoria"),
    ("description", "descripcion"),
    ("standard_tarima", "standard_tarima"),
)

_NUMERIC_DEFAULTS = {
    "largo_cm": 0, "ancho_cm": 0, "alto_cm": 0, "peso_kg": 0,
    "existencias": 0, "precio": 0, "costo": 0,
}

_MISSING = object()


def _lookup(fields: Mapping[str, Any], path: str):
    """Dotted lookup that tells "absent" apart from an explicit None."""
    cur: Any = fields
    for key in path.split("."):
        if not isinstance(cur, Mapping) or key not in cur:
            return _MISSING
        cur = cur[key]
    return cur


class ProductsRepo(ResourceRepo):
    title = "Products"
    path = "/api/productos"
    id_field = "id"

    def to_api(self, fields: Mapping[str, Any], mode: MutationMode) -> dict:
        """
        Create sends the full article (numeric fields default to 0, supplier
        may be null); update sends only the fields present in `fields`.
        """
        body: dict[str, Any] = {}
        for src, dst in _FIELD_MAP:
            value = _lookup(fields, src)
            if value is _MISSING:
                if src == "supplier.id" and "supplier" in fields and fields["supplier"] is None:
                    body[dst] = None
                continue
            body[dst] = value
        if mode is MutationMode.CREATE:
            body.setdefault("master_sku", "")
            body.setdefault("nombre_producto", "")
            body.setdefault("foto", None)
            body.setdefault("id_proveedor", None)
            for key, default in _NUMERIC_DEFAULTS.items():
                if body.get(key) is None:
                    body[key] = default
        else:
            # the SKU is the product's key and cannot be changed
            body.pop("master_sku", None)
        return body

    async def find_by_sku(self, sku: str, *, token: Optional[str] = None) -> Optional[dict]:
        """
        Server-side search for `sku`, then an exact (case-insensitive) match
        on the product's SKU. Returns None when nothing matches.
        """
        needle = (sku or "").strip().lower()
        if not needle:
            return None
        page = await self.list_page(1, 20, needle, token=token)
        for record in page.records:
            if str(get_path(record, "sku", "")).strip().lower() == needle:
                return record
        return None
