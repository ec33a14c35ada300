"""Resource list engine: fetch, directives, last-request-wins, mutate + resync."""

import asyncio

import pytest

from inventory_client.api.errors import AuthError, HttpError, NetworkError, ValidationError
from inventory_client.api.identity import StaticIdentityProvider
from inventory_client.api.repositories.base_repo import MutationRequest
from inventory_client.modules.resource_list.directives import Direction, SortDirective
from inventory_client.modules.resource_list.engine import ResourceListEngine
from inventory_client.modules.resource_list.state import EngineState, ViewStatus

from tests.conftest import PRODUCT_COLUMNS, FakeRepo, page_of, product


# ── Loading ──


@pytest.mark.asyncio
async def test_load_replaces_page_and_enters_ready(engine, repo):
    assert engine.state is EngineState.IDLE
    page = await engine.load()
    assert engine.state is EngineState.READY
    assert [r["id"] for r in page.records] == [1, 2, 3, 4]
    assert repo.list_calls == [(1, None, "tok-123")]


@pytest.mark.asyncio
async def test_listeners_see_loading_then_ready(engine):
    seen = []
    engine.subscribe(lambda vs: seen.append(vs.status))
    await engine.load()
    assert seen[0] is ViewStatus.LOADING
    assert seen[-1] is ViewStatus.READY


@pytest.mark.asyncio
async def test_unsubscribe_stops_updates(engine):
    seen = []
    unsubscribe = engine.subscribe(seen.append)
    unsubscribe()
    await engine.load()
    assert seen == []


@pytest.mark.asyncio
async def test_failed_load_keeps_previous_page_and_reports_error(engine, repo):
    await engine.load()
    before = engine.page
    repo.fail_list = HttpError(500, "Database unavailable")

    with pytest.raises(NetworkError):
        await engine.load(1, "bolt")

    assert engine.state is EngineState.ERROR
    assert engine.page is before
    vs = engine.view_state()
    assert vs.status is ViewStatus.ERROR
    assert vs.message == "Database unavailable"


@pytest.mark.asyncio
async def test_retry_reuses_last_arguments(engine, repo):
    repo.fail_list = NetworkError("offline")
    with pytest.raises(NetworkError):
        await engine.load(1, "anch")
    await engine.retry()
    assert repo.list_calls[-1] == (1, "anch", "tok-123")
    assert engine.state is EngineState.READY
    assert [r["name"] for r in engine.page.records] == ["Anchor"]


@pytest.mark.asyncio
async def test_load_without_token_is_an_auth_error(repo):
    engine = ResourceListEngine(repo, StaticIdentityProvider(), PRODUCT_COLUMNS, page_size=20)
    with pytest.raises(AuthError):
        await engine.load()
    assert repo.list_calls == []
    assert engine.state is EngineState.ERROR


@pytest.mark.asyncio
async def test_loading_state_hides_rows(engine, repo):
    await engine.load()
    hold = repo.hold_next()
    task = asyncio.ensure_future(engine.load())
    await asyncio.sleep(0)
    vs = engine.view_state()
    assert vs.status is ViewStatus.LOADING
    assert vs.rows == ()
    hold.set_result(page_of(product(9, "Late")))
    await task


# ── Last request wins ──


@pytest.mark.asyncio
async def test_stale_success_is_discarded(engine, repo):
    first = repo.hold_next()
    second = repo.hold_next()
    t1 = asyncio.ensure_future(engine.load(1))
    await asyncio.sleep(0)
    t2 = asyncio.ensure_future(engine.load(2))
    await asyncio.sleep(0)

    second.set_result(page_of(product(20, "Second"), page=2, total=40))
    await t2
    first.set_result(page_of(product(10, "First"), total=40))
    await t1

    assert [r["id"] for r in engine.page.records] == [20]
    assert engine.page.page == 2
    assert engine.state is EngineState.READY


@pytest.mark.asyncio
async def test_stale_failure_is_discarded(engine, repo):
    first = repo.hold_next()
    second = repo.hold_next()
    t1 = asyncio.ensure_future(engine.load(1))
    await asyncio.sleep(0)
    t2 = asyncio.ensure_future(engine.load(1, "x"))
    await asyncio.sleep(0)

    second.set_result(page_of(product(5, "Fresh")))
    await t2
    first.set_result(NetworkError("old request failed"))
    result = await t1  # no exception for a superseded load

    assert result is engine.page
    assert engine.state is EngineState.READY
    assert engine.error_message is None


# ── Directives ──


@pytest.mark.asyncio
async def test_filter_and_sort_recompute_view_without_refetch(engine, repo):
    await engine.load()
    engine.set_filter("stock", "10")
    engine.set_sort("name")
    assert [r["name"] for r in engine.derived_view()] == ["Anchor", "Clamp"]
    assert len(repo.list_calls) == 1


@pytest.mark.asyncio
async def test_directives_while_loading_are_replayed(engine, repo):
    hold = repo.hold_next()
    task = asyncio.ensure_future(engine.load())
    await asyncio.sleep(0)

    engine.set_sort("name")
    engine.set_sort("name")
    engine.set_filter("stock", "10")
    assert engine.sort is None
    assert engine.filters == {}

    hold.set_result(page_of(product(1, "b", 10), product(2, "a", 10), product(3, "c", 1)))
    await task

    assert engine.sort == SortDirective("name", Direction.DESC)
    assert [r["name"] for r in engine.derived_view()] == ["b", "a"]


@pytest.mark.asyncio
async def test_clear_all_drops_filters_and_sort(engine):
    await engine.load()
    engine.set_filter("name", "o")
    engine.set_sort("stock")
    engine.clear_all()
    assert engine.filters == {}
    assert engine.sort is None
    assert len(engine.derived_view()) == 4


@pytest.mark.asyncio
async def test_blank_filter_removes_directive(engine):
    await engine.load()
    engine.set_filter("name", "bolt")
    engine.set_filter("name", "  ")
    assert engine.filters == {}


@pytest.mark.asyncio
async def test_empty_view_is_ready_and_empty(engine):
    await engine.load()
    engine.set_filter("name", "zzz")
    vs = engine.view_state()
    assert vs.status is ViewStatus.READY
    assert vs.is_empty


# ── Mutations ──


@pytest.mark.asyncio
async def test_mutate_refetches_with_same_page_search_and_directives(engine, repo):
    await engine.load(1, "o")  # Bolt, Anchor, Dowel
    engine.set_filter("stock", "10")
    engine.set_sort("name")
    calls_before = len(repo.list_calls)

    await engine.mutate(MutationRequest.update(1, {"stock": 10}))

    assert len(repo.mutations) == 1
    assert repo.list_calls[calls_before:] == [(1, "o", "tok-123")]
    assert engine.filters == {"stock": "10"}
    assert engine.sort == SortDirective("name", Direction.ASC)
    assert [r["name"] for r in engine.derived_view()] == ["Anchor", "Bolt"]


@pytest.mark.asyncio
async def test_mutate_create_shows_new_record_after_resync(engine, repo):
    await engine.load()
    await engine.mutate(MutationRequest.create({"name": "Eyelet", "stock": 2}))
    assert "Eyelet" in [r["name"] for r in engine.page.records]


@pytest.mark.parametrize("request_", [
    MutationRequest.update(None, {"name": "x"}),
    MutationRequest.delete(None),
    MutationRequest.delete(""),
])
@pytest.mark.asyncio
async def test_update_or_delete_without_id_never_reaches_server(engine, repo, request_):
    await engine.load()
    calls = len(repo.list_calls)
    with pytest.raises(ValidationError):
        await engine.mutate(request_)
    assert repo.mutations == []
    assert len(repo.list_calls) == calls


@pytest.mark.asyncio
async def test_read_only_resource_rejects_mutations(identity):
    repo = FakeRepo([product(1, "a")], read_only=True)
    engine = ResourceListEngine(repo, identity, PRODUCT_COLUMNS, page_size=20)
    with pytest.raises(ValidationError):
        await engine.mutate(MutationRequest.create({"name": "b"}))
    assert repo.mutations == []


@pytest.mark.asyncio
async def test_failed_mutation_leaves_page_untouched(engine, repo):
    await engine.load()
    before = engine.page
    calls = len(repo.list_calls)
    repo.fail_mutation = HttpError(409, "SKU already exists")
    with pytest.raises(HttpError, match="SKU already exists"):
        await engine.mutate(MutationRequest.create({"name": "dup"}))
    assert engine.page is before
    assert len(repo.list_calls) == calls


@pytest.mark.asyncio
async def test_deleting_last_record_of_last_page_reloads_previous_page(identity):
    repo = FakeRepo([product(i, f"p{i}") for i in range(1, 4)])
    engine = ResourceListEngine(repo, identity, PRODUCT_COLUMNS, page_size=2)
    await engine.load(2)
    assert [r["id"] for r in engine.page.records] == [3]

    await engine.mutate(MutationRequest.delete(3))

    assert engine.page.page == 1
    assert [r["id"] for r in engine.page.records] == [1, 2]
    assert [c[0] for c in repo.list_calls[-2:]] == [2, 1]


@pytest.mark.asyncio
async def test_delete_without_response_body_still_resyncs(identity):
    class NoBodyRepo(FakeRepo):
        async def execute(self, request, *, token=None):
            await super().execute(request, token=token)
            return None

    repo = NoBodyRepo([product(1, "Bolt"), product(2, "Anchor")])
    engine = ResourceListEngine(repo, identity, PRODUCT_COLUMNS, page_size=20)
    await engine.load()
    calls = len(repo.list_calls)

    assert await engine.mutate(MutationRequest.delete(1)) is None

    assert len(repo.list_calls) == calls + 1
    assert [r["id"] for r in engine.page.records] == [2]
    assert engine.state is EngineState.READY


# ── Paging + search ──


@pytest.mark.asyncio
async def test_next_and_previous_page(identity):
    repo = FakeRepo([product(i, f"p{i}") for i in range(1, 6)])
    engine = ResourceListEngine(repo, identity, PRODUCT_COLUMNS, page_size=2)
    await engine.load()
    await engine.next_page()
    assert engine.page.page == 2
    await engine.previous_page()
    assert engine.page.page == 1
    calls = len(repo.list_calls)
    await engine.previous_page()  # already on first page
    assert len(repo.list_calls) == calls


@pytest.mark.asyncio
async def test_debounced_search_only_fires_last_term(engine, repo):
    engine.search("b")
    engine.search("bo")
    task = engine.search("bolt")
    await task
    assert repo.list_calls == [(1, "bolt", "tok-123")]
    assert [r["name"] for r in engine.page.records] == ["Bolt"]
    assert engine.search_term == "bolt"


@pytest.mark.asyncio
async def test_debounced_search_failure_lands_in_error_state(engine, repo):
    repo.fail_list = NetworkError("offline")
    result = await engine.search("x")
    assert result is None
    assert engine.state is EngineState.ERROR


@pytest.mark.asyncio
async def test_go_to_page_keeps_search_term(identity):
    repo = FakeRepo([product(i, f"p{i}") for i in range(1, 6)])
    engine = ResourceListEngine(repo, identity, PRODUCT_COLUMNS, page_size=2)
    await engine.load(1, "p")
    await engine.go_to_page(3)
    assert repo.list_calls[-1] == (3, "p", "tok-123")
    assert engine.page.page == 3
    assert [r["id"] for r in engine.page.records] == [5]


@pytest.mark.asyncio
async def test_cancelled_search_restores_state_and_replays_directives(engine, repo):
    await engine.load()
    hold = repo.hold_next()
    task = engine.search("a")
    await asyncio.sleep(0.05)
    assert engine.state is EngineState.LOADING

    engine.set_sort("name")
    assert engine.sort is None
    engine.cancel_pending()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert hold.cancelled()
    assert engine.state is EngineState.READY
    assert engine.sort == SortDirective("name", Direction.ASC)
    assert engine.view_state().status is ViewStatus.READY
