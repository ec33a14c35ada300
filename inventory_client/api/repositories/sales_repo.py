# inventory_client/api/repositories/sales_repo.py
from __future__ import annotations

from typing import Any, Mapping

from .base_repo import MutationMode, ResourceRepo


class SalesRepo(ResourceRepo):
    """
    Sales are listed one row per folio; a sale order is written as
    {id_orden, cliente, fecha, folios: [{numero_folio, productos: [...]}]}.
    """

    title = "Sales"
    path = "/api/ventas"
    list_params = {"type": "ventas"}
    id_field = "id_venta"

    def to_api(self, fields: Mapping[str, Any], mode: MutationMode) -> dict:
        body = dict(fields)
        folios = []
        for folio in body.get("folios") or []:
            folios.append({
                "numero_folio": folio.get("numero_folio"),
                "productos": [
                    {
                        "nombre": p.get("nombre"),
                        "sku": p.get("sku"),
                        "cantidad": p.get("cantidad"),
                        "precio": p.get("precio"),
                    }
                    for p in folio.get("productos") or []
                ],
            })
        if "folios" in body:
            body["folios"] = folios
        return body
