# inventory_client/api/envelope.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..constants import DEFAULT_PAGE_SIZE
from ..utils.validators import try_parse_int
from .errors import NetworkError

Record = dict


@dataclass(frozen=True)
class Page:
    """
    One bounded batch of records plus pagination metadata.

    Invariants (enforced on construction):
      - 0 <= len(records) <= page_size; more records raise ValueError
      - total_pages == ceil(total / page_size)
      - page is clamped to [1, total_pages] once total_pages > 0
    """
    records: tuple = field(default_factory=tuple)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    def __post_init__(self):
        size = max(1, int(self.page_size))
        records = tuple(self.records)
        if len(records) > size:
            raise ValueError(f"Page holds {len(records)} records but page_size is {size}")
        total = max(int(self.total), len(records))
        pages = math.ceil(total / size) if total else 0
        page = max(1, int(self.page))
        if pages > 0:
            page = min(page, pages)
        object.__setattr__(self, "page_size", size)
        object.__setattr__(self, "records", records)
        object.__setattr__(self, "total", total)
        object.__setattr__(self, "page", page)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @classmethod
    def empty(cls, page_size: int = DEFAULT_PAGE_SIZE) -> "Page":
        return cls((), 1, page_size, 0)


def _int_or_none(value) -> Optional[int]:
    if value is None:
        return None
    ok, val = try_parse_int(value)
    return val if ok else None


def normalize_page(payload: Any, *, page: int, page_size: int) -> Page:
    """
    Fold the backend's response envelopes into a Page.

    Accepted shapes:
      - {"items": [...], "page", "pageSize", "total"}
      - {"data": [...], "pagination": {"page", "pageSize", "total"}}
      - a bare list (no server paging)

    When the server sends no paging metadata at all, or sends back more
    rows than one page without saying how big its pages are, the
    collection is paged here so the Page invariants hold either way.
    """
    meta: Mapping[str, Any] = {}
    if isinstance(payload, list):
        items = payload
        top: Mapping[str, Any] = {}
    elif isinstance(payload, Mapping):
        top = payload
        items = payload.get("items")
        if items is None:
            items = payload.get("data")
        if isinstance(items, Mapping):
            # {"data": {"items": [...], ...}}
            top = items
            items = items.get("items")
        if items is None:
            items = []
        pagination = payload.get("pagination")
        if isinstance(pagination, Mapping):
            meta = pagination
    else:
        raise NetworkError("Unexpected response from server")

    if not isinstance(items, list):
        raise NetworkError("Unexpected response from server")
    rows = [dict(r) if isinstance(r, Mapping) else r for r in items]

    srv_total = _int_or_none(top.get("total", meta.get("total")))
    srv_page = _int_or_none(top.get("page", meta.get("page")))
    srv_size = _int_or_none(top.get("pageSize", meta.get("pageSize")))

    if srv_total is None and srv_page is None and srv_size is None:
        size = max(1, int(page_size))
        start = (max(1, int(page)) - 1) * size
        return Page(tuple(rows[start:start + size]), page, size, len(rows))

    size = srv_size if srv_size and srv_size > 0 else max(1, int(page_size))
    total = srv_total if srv_total is not None else len(rows)
    if len(rows) > size:
        # endpoint ignored the paging params and returned the whole collection
        start = (max(1, int(page)) - 1) * size
        return Page(tuple(rows[start:start + size]), page, size, max(total, len(rows)))
    return Page(tuple(rows), srv_page or page, size, total)
