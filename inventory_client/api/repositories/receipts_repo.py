# inventory_client/api/repositories/receipts_repo.py
from __future__ import annotations

from typing import Any, Mapping

from ...utils.validators import try_parse_int
from .base_repo import MutationMode, ResourceRepo


class ReceiptsRepo(ResourceRepo):
    """
    Purchase receipts. The form works with an order + supplier + line items;
    the backend stores the supplier name, the order number and the total.
    """

    title = "Receipts"
    path = "/api/recibos"
    id_field = "id_recibo"

    def to_api(self, fields: Mapping[str, Any], mode: MutationMode) -> dict:
        body: dict[str, Any] = {}
        if "proveedor_name" in fields:
            body["proveedor"] = fields.get("proveedor_name") or None
        if "proveedor_id" in fields:
            body["id_proveedor"] = fields.get("proveedor_id")
        if "orden" in fields:
            ok, order = try_parse_int(fields.get("orden"))
            body["id_orden"] = order if ok else fields.get("orden") or None
        if "productos" in fields:
            lines = list(fields.get("productos") or [])
            body["precio"] = round(
                sum(float(p.get("cantidad") or 0) * float(p.get("costo_por_articulo") or 0) for p in lines),
                2,
            )
            body["productos"] = [
                {
                    "nombre": p.get("nombre"),
                    "sku": p.get("sku"),
                    "cantidad": p.get("cantidad"),
                    "costo_por_articulo": p.get("costo_por_articulo"),
                }
                for p in lines
            ]
        if "fecha_compra" in fields:
            body["fecha_compra"] = fields.get("fecha_compra")
        if "eta" in fields:
            body["fecha_llegada"] = fields.get("eta") or None
        if "recibido" in fields:
            body["recibido"] = bool(fields.get("recibido"))
        elif mode is MutationMode.CREATE:
            body["recibido"] = False
        if fields.get("pdf"):
            body["pdf"] = fields["pdf"]
        return body
