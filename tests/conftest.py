# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures), offscreen
# - async tests use pytest-asyncio (@pytest.mark.asyncio)
# - no network: repositories are faked in memory, HTTP goes through
#   httpx.MockTransport
# ---------------------------------------------------------------------

from __future__ import annotations

import asyncio
import os
from typing import Optional

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from inventory_client.api.envelope import Page, normalize_page
from inventory_client.api.errors import NetworkError
from inventory_client.api.identity import StaticIdentityProvider
from inventory_client.api.repositories.base_repo import MutationMode, ResourceRepo
from inventory_client.modules.resource_list.directives import ColumnKind, ColumnSpec
from inventory_client.modules.resource_list.engine import ResourceListEngine


PRODUCT_COLUMNS = (
    ColumnSpec("sku", "SKU"),
    ColumnSpec("name", "Name"),
    ColumnSpec("supplier", "Supplier", path="supplier.name"),
    ColumnSpec("stock", "Stock", ColumnKind.NUMBER),
    ColumnSpec("price", "Price", ColumnKind.NUMBER),
    ColumnSpec("created", "Created", ColumnKind.DATE, searchable=False),
)


def product(pid: int, name: str, stock=0, *, sku: str | None = None, supplier: str | None = None, **extra) -> dict:
    rec = {"id": pid, "sku": sku or f"SKU-{pid}", "name": name, "stock": stock}
    if supplier is not None:
        rec["supplier"] = {"id": pid * 10, "name": supplier}
    rec.update(extra)
    return rec


class FakeRepo(ResourceRepo):
    """
    In-memory collection that records every call.

    - hold_next(): the next list_page waits on the returned future; resolve
      it with a Page or an exception to control response order.
    - fail_list / fail_mutation: raise once on the next call.
    """

    title = "Fake"
    path = "/api/fake"

    def __init__(self, records=None, *, read_only: bool = False):
        super().__init__(transport=None)
        self.records = [dict(r) for r in (records or [])]
        self.read_only = read_only
        self.list_calls: list[tuple] = []
        self.mutations: list = []
        self.fail_list: Optional[Exception] = None
        self.fail_mutation: Optional[Exception] = None
        self._held: list[asyncio.Future] = []
        self._next_id = max([r.get("id", 0) for r in self.records] + [0]) + 1

    def hold_next(self) -> asyncio.Future:
        fut = asyncio.get_running_loop().create_future()
        self._held.append(fut)
        return fut

    async def list_page(self, page, page_size, search=None, *, token=None):
        self.list_calls.append((page, search, token))
        if self._held:
            outcome = await self._held.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        if self.fail_list is not None:
            exc, self.fail_list = self.fail_list, None
            raise exc
        rows = [
            r for r in self.records
            if not search or search.lower() in str(r.get("name", "")).lower()
        ]
        return normalize_page(rows, page=page, page_size=page_size)

    async def execute(self, request, *, token=None):
        self.check(request)
        self.mutations.append((request, token))
        if self.fail_mutation is not None:
            exc, self.fail_mutation = self.fail_mutation, None
            raise exc
        if request.mode is MutationMode.CREATE:
            rec = {"id": self._next_id, **request.fields}
            self._next_id += 1
            self.records.append(rec)
            return {"ok": True, "id": rec["id"]}
        for i, rec in enumerate(self.records):
            if rec.get("id") == request.record_id:
                if request.mode is MutationMode.DELETE:
                    del self.records[i]
                else:
                    rec.update(request.fields)
                return {"ok": True}
        raise NetworkError("Not found")


class FakeEngine:
    """Stands in for the list engine behind a form: records mutate() calls."""

    def __init__(self, repo: Optional[ResourceRepo] = None):
        self.repo = repo or FakeRepo()
        self.requests: list = []
        self.fail: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None

    async def mutate(self, request):
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail is not None:
            exc, self.fail = self.fail, None
            raise exc
        return {"ok": True}


@pytest.fixture
def identity():
    return StaticIdentityProvider.from_token("tok-123", role="admin")


@pytest.fixture
def products():
    return [
        product(1, "Bolt", 5, supplier="Acme"),
        product(2, "Anchor", 10, supplier="Borealis"),
        product(3, "Clamp", 10, supplier="acme tools"),
        product(4, "Dowel", 0),
    ]


@pytest.fixture
def repo(products):
    return FakeRepo(products)


@pytest.fixture
def engine(repo, identity):
    return ResourceListEngine(repo, identity, PRODUCT_COLUMNS, page_size=20, debounce_seconds=0.01)


def page_of(*records, page: int = 1, page_size: int = 20, total: int | None = None) -> Page:
    return Page(tuple(records), page, page_size, len(records) if total is None else total)
