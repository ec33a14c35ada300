# inventory_client/modules/forms/controller.py
from __future__ import annotations

import asyncio
import base64
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional

from ...api.errors import NetworkError, ValidationError
from ...api.repositories.base_repo import MutationMode, MutationRequest
from ...constants import GENERIC_SAVE_ERROR
from ...utils.helpers import get_path, set_path
from ...utils.validators import as_number, non_empty, try_parse_float
from .fields import FieldKind, FormSchema, is_omitted

_log = logging.getLogger(__name__)


class EntityFormController:
    """
    Create/edit form state for one resource.

    Lifecycle: open(mode, seed) -> set_value(...) -> submit().
    Validation failures never reach the network; a failed save keeps the
    form open with every entered value and the server's message in `error`.
    Only one submit runs at a time; extra calls while saving are ignored.
    """

    def __init__(self, schema: FormSchema, engine):
        self.schema = schema
        self.engine = engine
        self.mode: Optional[MutationMode] = None
        self.record_id: Any = None
        self.values: dict[str, Any] = {}
        self.error: Optional[str] = None
        self.error_field: Optional[str] = None
        self.is_open = False
        self._in_flight = False
        self.attachments = AttachmentReader()

    @property
    def is_submitting(self) -> bool:
        return self._in_flight

    def open(self, mode, seed: Optional[Mapping[str, Any]] = None) -> None:
        self.mode = MutationMode(mode)
        self.values = self.schema.defaults()
        self.record_id = None
        if seed is not None:
            for f in self.schema.fields:
                v = get_path(seed, f.seed_path or f.name)
                if v is not None:
                    self.values[f.name] = [dict(x) for x in v] if f.kind is FieldKind.LINES else v
            self.record_id = self.engine.repo.record_id(seed)
        self.error = None
        self.error_field = None
        self.is_open = True

    def close(self) -> None:
        self.attachments.cancel_all()
        self.is_open = False

    def set_value(self, name: str, value: Any) -> None:
        self.schema.get(name)  # KeyError for unknown fields
        self.values[name] = value

    def validate(self) -> Optional[str]:
        for f in self.schema.fields:
            msg = f.check(self.values.get(f.name))
            if msg:
                self.error_field = f.name
                return msg
        for check in self.schema.checks:
            msg = check(self.values)
            if msg:
                self.error_field = None
                return msg
        self.error_field = None
        return None

    def serialize(self) -> dict:
        out: dict[str, Any] = {}
        for f in self.schema.fields:
            value = f.coerce(self.values.get(f.name))
            if is_omitted(value):
                continue
            set_path(out, f.name, value)
        return out

    def build_request(self) -> MutationRequest:
        if self.mode is MutationMode.UPDATE:
            return MutationRequest.update(self.record_id, self.serialize())
        return MutationRequest.create(self.serialize())

    async def submit(self) -> bool:
        """
        Validate, send, and close on success. Returns False when the call was
        ignored because a save is already running.
        """
        if self._in_flight:
            _log.debug("%s: submit ignored, save already in flight", self.schema.title)
            return False
        msg = self.validate()
        if msg:
            self.error = msg
            raise ValidationError(msg, field=self.error_field)

        self._in_flight = True
        self.error = None
        try:
            await self.engine.mutate(self.build_request())
        except ValidationError as exc:
            self.error = exc.message
            raise
        except NetworkError as exc:
            self.error = str(exc) or GENERIC_SAVE_ERROR
            _log.warning("%s: save failed: %s", self.schema.title, self.error)
            raise
        finally:
            self._in_flight = False
        self.close()
        return True

    async def load_attachment(self, name: str, path: str) -> Optional[str]:
        """
        Read `path` for attachment field `name` off the event loop. A newer
        read for the same field supersedes this one (returns None).
        """
        f = self.schema.get(name)
        try:
            task = self.attachments.read(name, path, accept=f.accept, mime=f.mime)
        except ValidationError as exc:
            self.error = exc.message
            raise
        await asyncio.wait({task})
        if task.cancelled():
            return None
        exc = task.exception()
        if exc is not None:
            self.error = str(exc)
            raise exc
        payload = task.result()
        self.values[name] = payload
        return payload


class AttachmentReader:
    """One in-flight file read per field; file bytes are read in a worker thread."""

    def __init__(self):
        self._tasks: dict[str, asyncio.Task] = {}

    def read(self, field: str, path: str, *, accept=(), mime: Optional[str] = None) -> asyncio.Task:
        p = Path(path)
        if accept and p.suffix.lower() not in tuple(a.lower() for a in accept):
            allowed = ", ".join(accept)
            raise ValidationError(f"Only {allowed} files are allowed.", field=field)
        old = self._tasks.get(field)
        if old is not None and not old.done():
            old.cancel()
        task = asyncio.ensure_future(self._read(p, mime))
        self._tasks[field] = task
        return task

    @staticmethod
    async def _read(p: Path, mime: Optional[str]) -> str:
        try:
            data = await asyncio.to_thread(p.read_bytes)
        except OSError as exc:
            raise ValidationError(f"Could not read {p.name}: {exc.strerror or exc}") from exc
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{mime};base64,{encoded}" if mime else encoded

    def cancel_all(self) -> None:
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
        self._tasks.clear()


Lookup = Callable[[str], Awaitable[Optional[Mapping[str, Any]]]]


class LineItemsEditor:
    """
    Editable product lines (receipts, sale folios).

    Lines are plain dicts: {nombre, sku, cantidad, <amount_key>}.
    `add_by_sku` looks the product up and appends it with quantity 1, or
    bumps the quantity when the SKU is already on the list.
    """

    def __init__(self, lookup: Optional[Lookup] = None, *, amount_key: str = "precio",
                 source_field: str = "price", lines=None):
        self.lookup = lookup
        self.amount_key = amount_key
        self.source_field = source_field
        self.lines: list[dict] = [dict(x) for x in (lines or [])]

    def add_blank(self) -> dict:
        line = {"nombre": "", "sku": "", "cantidad": 1, self.amount_key: 0}
        self.lines.append(line)
        return line

    async def add_by_sku(self, sku: str) -> dict:
        sku = (sku or "").strip()
        if not sku:
            raise ValidationError("Enter a SKU first.", field="sku")
        for line in self.lines:
            if str(line.get("sku", "")).strip().lower() == sku.lower():
                line["cantidad"] = int(as_number(line.get("cantidad"))) + 1
                return line
        if self.lookup is None:
            raise ValidationError(f"No product found with SKU {sku}.", field="sku")
        product = await self.lookup(sku)
        if not product:
            raise ValidationError(f"No product found with SKU {sku}.", field="sku")
        line = {
            "nombre": get_path(product, "name", ""),
            "sku": get_path(product, "sku", sku),
            "cantidad": 1,
            self.amount_key: as_number(get_path(product, self.source_field)),
        }
        self.lines.append(line)
        return line

    def update(self, index: int, **changes) -> dict:
        line = self.lines[index]
        for key, value in changes.items():
            if key in ("cantidad", self.amount_key):
                ok, val = try_parse_float(value)
                value = val if ok else 0
                if key == "cantidad" and float(value).is_integer():
                    value = int(value)
            line[key] = value
        return line

    def remove(self, index: int) -> None:
        del self.lines[index]

    def total(self) -> float:
        return round(sum(as_number(l.get("cantidad")) * as_number(l.get(self.amount_key)) for l in self.lines), 2)

    def snapshot(self) -> list[dict]:
        return [dict(l) for l in self.lines]


def check_lines(lines, *, amount_key: str, amount_label: str) -> Optional[str]:
    """Every line needs name + SKU and strictly positive quantity and amount."""
    for line in lines or []:
        if not non_empty(line.get("nombre")) or not non_empty(line.get("sku")):
            return "Every product needs a name and a SKU."
        if as_number(line.get("cantidad")) <= 0 or as_number(line.get(amount_key)) <= 0:
            return f"Quantity and {amount_label} must be greater than 0."
    return None
