# inventory_client/modules/resource_list/engine.py
"""
Resource List Engine: one instance per list page, bound to one repository.

    IDLE -> LOADING -> READY | ERROR
    READY -> LOADING   (any refetch)
    ERROR -> LOADING   (retry or a new load)

Each load carries a sequence number; a response (success or failure) that
arrives after a newer load was started is discarded. Filter/sort changes
made while a load is in flight are queued and replayed once it settles;
a cancelled load puts back the last settled state before replaying them.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence

from ...api.envelope import Page
from ...api.errors import AuthError, NetworkError
from ...api.repositories.base_repo import MutationRequest, ResourceRepo
from ...config import get_settings
from ...constants import GENERIC_LOAD_ERROR
from .directives import ColumnSpec, SortDirective, derive_view, next_sort
from .state import EngineState, ViewState

_log = logging.getLogger(__name__)

Listener = Callable[[ViewState], None]


class ResourceListEngine:
    def __init__(
        self,
        repo: ResourceRepo,
        identity,
        columns: Sequence[ColumnSpec],
        *,
        page_size: Optional[int] = None,
        debounce_seconds: Optional[float] = None,
    ):
        settings = get_settings()
        self.repo = repo
        self.identity = identity
        self.columns = tuple(columns)
        self.page_size = int(page_size or settings.page_size)
        self.debounce_seconds = (
            settings.search_debounce_seconds if debounce_seconds is None else float(debounce_seconds)
        )

        self.page: Page = Page.empty(self.page_size)
        self.filters: dict[str, str] = {}
        self.sort: Optional[SortDirective] = None
        self.state = EngineState.IDLE
        self._settled_state = EngineState.IDLE
        self.error_message: Optional[str] = None
        self.search_term: Optional[str] = None

        self._last_args: tuple[int, Optional[str]] = (1, None)
        self._seq = 0
        self._queued: list[Callable[[], None]] = []
        self._search_task: Optional[asyncio.Task] = None
        self._listeners: list[Listener] = []

    # ---------------------------- observers ----------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for ViewState updates; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def view_state(self) -> ViewState:
        if self.state in (EngineState.IDLE, EngineState.LOADING):
            return ViewState.loading()
        if self.state is EngineState.ERROR:
            return ViewState.failed(self.error_message or GENERIC_LOAD_ERROR)
        return ViewState.ready(self.derived_view())

    def _notify(self) -> None:
        vs = self.view_state()
        for listener in list(self._listeners):
            listener(vs)

    # ---------------------------- fetching ----------------------------

    def _token(self) -> str:
        token = self.identity.get_token() if self.identity is not None else None
        if not token:
            raise AuthError("You are not signed in.")
        return token

    async def load(self, page: int = 1, search: Optional[str] = None) -> Page:
        """
        Fetch `page` (optionally narrowed by a server-side `search`). The
        authoritative Page is replaced only when this is still the newest
        load; a superseded load returns the current Page untouched.
        """
        self._seq += 1
        seq = self._seq
        search = search.strip() if search and search.strip() else None
        self._last_args = (max(1, int(page)), search)
        self.search_term = search
        self.state = EngineState.LOADING
        self._notify()

        try:
            result = await self.repo.list_page(self._last_args[0], self.page_size, search, token=self._token())
        except asyncio.CancelledError:
            if seq == self._seq:
                # fall back to what was on screen and run queued directives
                _log.debug("%s: load #%d cancelled", self.repo.title, seq)
                self.state = self._settled_state
                self._settle()
            raise
        except (NetworkError, AuthError) as exc:
            if seq != self._seq:
                _log.debug("%s: discarding stale failure (load #%d)", self.repo.title, seq)
                return self.page
            _log.warning("%s: load failed: %s", self.repo.title, exc)
            self.state = self._settled_state = EngineState.ERROR
            self.error_message = str(exc) or GENERIC_LOAD_ERROR
            self._settle()
            raise

        if seq != self._seq:
            _log.debug("%s: discarding stale response (load #%d)", self.repo.title, seq)
            return self.page

        requested = self._last_args[0]
        if not result.records and result.total_pages and requested > result.total_pages:
            # e.g. the only record of the last page was deleted
            return await self.load(result.total_pages, search)

        self.page = result
        self.state = self._settled_state = EngineState.READY
        self.error_message = None
        self._settle()
        return self.page

    async def retry(self) -> Page:
        page, search = self._last_args
        return await self.load(page, search)

    async def go_to_page(self, page: int) -> Page:
        return await self.load(page, self.search_term)

    async def next_page(self) -> Page:
        if not self.page.has_next:
            return self.page
        return await self.load(self.page.page + 1, self.search_term)

    async def previous_page(self) -> Page:
        if not self.page.has_previous:
            return self.page
        return await self.load(self.page.page - 1, self.search_term)

    def search(self, term: Optional[str]) -> asyncio.Task:
        """
        Debounced server-side search: restarts the timer on every call, and
        only the last term within the window triggers `load(1, term)`.
        """
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = asyncio.ensure_future(self._debounced_load(term))
        return self._search_task

    async def _debounced_load(self, term: Optional[str]) -> Optional[Page]:
        await asyncio.sleep(self.debounce_seconds)
        try:
            return await self.load(1, term)
        except NetworkError:
            # already reflected in ERROR state
            return None

    # ---------------------------- directives ----------------------------

    def _settle(self) -> None:
        queued, self._queued = self._queued, []
        for op in queued:
            op()
        self._notify()

    def _apply(self, op: Callable[[], None]) -> None:
        if self.state is EngineState.LOADING:
            self._queued.append(op)
            return
        op()
        self._notify()

    def set_filter(self, field: str, value: Optional[str]) -> None:
        def op():
            if value is None or not str(value).strip():
                self.filters.pop(field, None)
            else:
                self.filters[field] = str(value)
        self._apply(op)

    def set_sort(self, field: str) -> None:
        def op():
            self.sort = next_sort(self.sort, field)
        self._apply(op)

    def clear_all(self) -> None:
        def op():
            self.filters.clear()
            self.sort = None
        self._apply(op)

    def derived_view(self) -> list:
        return derive_view(self.page.records, self.filters, self.sort, self.columns)

    # ---------------------------- mutations ----------------------------

    async def mutate(self, request: MutationRequest) -> Any:
        """
        Send a create/update/delete, then refetch the current page and search
        term (filters and sort are kept). Nothing is patched locally; if the
        mutation fails the Page is unchanged and the error propagates.
        """
        self.repo.check(request)
        result = await self.repo.execute(request, token=self._token())
        page, search = self._last_args
        try:
            await self.load(page, search)
        except NetworkError:
            # the write succeeded; the list now shows the error with retry
            pass
        return result

    def cancel_pending(self) -> None:
        """Drop a pending debounced search (page being torn down)."""
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = None

