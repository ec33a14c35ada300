# inventory_client/modules/resource_list/directives.py
"""
Filter and sort directives, and the pure function that applies them to a page.

Everything here is synchronous and side-effect free: the same
(records, filters, sort) always yields the same view, and the input
records are never modified.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ...constants import QUICK_FILTER
from ...utils.helpers import fmt_date, get_path, timestamp_of
from ...utils.validators import as_number, try_parse_float


class ColumnKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class ColumnSpec:
    """
    One column of a resource table.

    `key` is the field name directives refer to; `path` (default: key) is
    the dotted path read from the record, e.g. "supplier.name".
    """
    key: str
    header: str
    kind: ColumnKind = ColumnKind.STRING
    path: Optional[str] = None
    searchable: bool = True
    sortable: bool = True
    formatter: Optional[Callable[[Any], str]] = None

    def value(self, record: Mapping[str, Any]) -> Any:
        return get_path(record, self.path or self.key)

    def text(self, record: Mapping[str, Any]) -> str:
        """Display text; also what string filters and the quick filter match against."""
        v = self.value(record)
        if self.formatter is not None:
            return self.formatter(v)
        if v is None:
            return ""
        if self.kind is ColumnKind.DATE:
            return fmt_date(v)
        if self.kind is ColumnKind.NUMBER and isinstance(v, float) and v.is_integer():
            return str(int(v))
        return str(v)

    def sort_key(self, record: Mapping[str, Any]):
        v = self.value(record)
        if self.kind is ColumnKind.NUMBER:
            return as_number(v)
        if self.kind is ColumnKind.DATE:
            return timestamp_of(v)
        return ("" if v is None else str(v)).casefold()


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortDirective:
    field: str
    direction: Direction = Direction.ASC


def next_sort(current: Optional[SortDirective], field: str) -> Optional[SortDirective]:
    """
    Three-state toggle on one column: none -> asc -> desc -> none.
    Picking a different column starts it at asc and drops the previous one.
    """
    if current is None or current.field != field:
        return SortDirective(field, Direction.ASC)
    if current.direction is Direction.ASC:
        return SortDirective(field, Direction.DESC)
    return None


def column_for(columns: Sequence[ColumnSpec], key: str) -> ColumnSpec:
    for col in columns:
        if col.key == key:
            return col
    # unknown fields are still filterable/sortable as plain strings
    return ColumnSpec(key, key)


def _matches_one(record, col: ColumnSpec, needle: str) -> bool:
    if col.kind is ColumnKind.NUMBER:
        ok, wanted = try_parse_float(needle)
        if not ok:
            return True  # unparseable numeric filter is ignored
        return as_number(col.value(record)) == wanted
    return needle.casefold() in col.text(record).casefold()


def matches(
    record: Mapping[str, Any],
    filters: Mapping[str, str],
    columns: Sequence[ColumnSpec],
) -> bool:
    """AND of every non-blank directive. The "*" key matches any searchable column."""
    for key, raw in filters.items():
        needle = (raw or "").strip()
        if not needle:
            continue
        if key == QUICK_FILTER:
            lowered = needle.casefold()
            if not any(lowered in c.text(record).casefold() for c in columns if c.searchable):
                return False
            continue
        if not _matches_one(record, column_for(columns, key), needle):
            return False
    return True


def derive_view(
    records: Iterable[Mapping[str, Any]],
    filters: Mapping[str, str],
    sort: Optional[SortDirective],
    columns: Sequence[ColumnSpec],
) -> list:
    """
    Filtered then sorted copy of `records`. Sorting is stable in both
    directions, so rows with equal keys keep their fetch order.
    """
    rows = [r for r in records if matches(r, filters, columns)]
    if sort is not None:
        col = column_for(columns, sort.field)
        rows = sorted(rows, key=col.sort_key, reverse=sort.direction is Direction.DESC)
    return rows
