# inventory_client/modules/forms/fields.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence

from ...utils.validators import non_empty, try_parse_float, try_parse_int


class FieldKind(str, Enum):
    TEXT = "text"
    INT = "int"
    FLOAT = "float"
    DATE = "date"
    CHOICE = "choice"
    BOOL = "bool"
    RELATED = "related"        # id picked from another resource
    ATTACHMENT = "attachment"  # base64 payload read from a file
    LINES = "lines"            # list of line-item dicts


class BlankPolicy(str, Enum):
    """What a blank or unparseable optional value turns into."""
    ZERO = "zero"
    NULL = "null"
    OMIT = "omit"


_OMIT = object()


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    blank: BlankPolicy = BlankPolicy.NULL
    default: Any = None
    seed_path: Optional[str] = None
    choices: Sequence[str] = ()
    min_value: Optional[float] = None
    accept: Sequence[str] = ()
    mime: Optional[str] = None
    required_message: Optional[str] = None

    def is_blank(self, raw: Any) -> bool:
        if self.kind is FieldKind.LINES:
            return not raw
        if self.kind is FieldKind.BOOL:
            return raw is None
        return not non_empty(raw)

    def _blank_value(self):
        if self.blank is BlankPolicy.OMIT:
            return _OMIT
        if self.blank is BlankPolicy.ZERO:
            return 0
        return None

    def coerce(self, raw: Any):
        """Form value -> wire value (may be the omit sentinel)."""
        if self.kind is FieldKind.BOOL:
            return bool(raw)
        if self.kind is FieldKind.LINES:
            return [dict(x) for x in (raw or [])]
        if self.is_blank(raw):
            return self._blank_value()
        if self.kind is FieldKind.INT:
            ok, val = try_parse_int(raw)
            return val if ok else self._blank_value()
        if self.kind is FieldKind.FLOAT:
            ok, val = try_parse_float(raw)
            return val if ok else self._blank_value()
        if self.kind is FieldKind.RELATED:
            ok, val = try_parse_int(raw)
            return val if ok else raw
        if isinstance(raw, str):
            return raw.strip()
        return raw

    def check(self, raw: Any) -> Optional[str]:
        """First problem with this field alone, or None."""
        if self.required and self.is_blank(raw):
            return self.required_message or f"{self.label} is required."
        if self.is_blank(raw):
            return None
        if self.kind is FieldKind.CHOICE and self.choices and raw not in self.choices:
            return f"{self.label}: '{raw}' is not a valid option."
        if self.min_value is not None and self.kind in (FieldKind.INT, FieldKind.FLOAT):
            ok, val = try_parse_float(raw)
            if ok and val is not None and val < self.min_value:
                return f"{self.label} must be at least {self.min_value:g}."
        return None


Check = Callable[[Mapping[str, Any]], Optional[str]]


@dataclass(frozen=True)
class FormSchema:
    """
    Fields of one entity form plus whole-form checks (cross-field rules,
    line items). Checks run after the per-field ones, in order.
    """
    title: str
    fields: Sequence[FormField]
    checks: Sequence[Check] = field(default_factory=tuple)

    def defaults(self) -> dict:
        out = {}
        for f in self.fields:
            d = f.default() if callable(f.default) else f.default
            if f.kind is FieldKind.LINES and d is None:
                d = []
            out[f.name] = d
        return out

    def get(self, name: str) -> FormField:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


def is_omitted(value) -> bool:
    return value is _OMIT
