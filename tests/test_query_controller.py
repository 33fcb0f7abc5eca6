"""Tests for draft/commit handling and stale-response discarding."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from conftest import FakeSearch, StaticSearch, make_item
from story_search.services.exceptions import SearchTransportError
from story_search.services.query import QueryController
from story_search.services.search import SearchService
from story_search.services.storage import MemoryStore
from story_search.state.fetch import FetchResult
from story_search.state.persistent import PersistentValue


async def _controller(search, *, stored: str | None = None, default: str = "React") -> QueryController:
    store = MemoryStore({} if stored is None else {"search": stored})
    draft = await PersistentValue.create(store, "search", default)
    return QueryController(search, draft)


async def _start(coro) -> asyncio.Task:
    task = asyncio.create_task(coro)
    # Let the cycle run up to its network call.
    await asyncio.sleep(0)
    return task


@pytest.mark.asyncio
async def test_scenario_a_submit_fetches_committed_query():
    hits = [{"objectID": "1", "title": "T", "url": "u", "author": "a", "num_comments": 2, "points": 5}]
    queries: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        queries.append(request.url.params["query"])
        return httpx.Response(200, json={"hits": hits})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        controller = await _controller(SearchService(client), default="")
        controller.on_draft_change("React")
        applied = await controller.on_submit()

    assert applied is True
    assert queries == ["React"]
    assert controller.state.status == "success"
    assert [item.id for item in controller.state.items] == ["1"]
    assert controller.search_state.committed_query == "React"


@pytest.mark.asyncio
async def test_scenario_b_remove_after_success_keeps_status():
    controller = await _controller(StaticSearch([make_item("1")]))
    await controller.on_submit()

    controller.on_remove_item("1")

    assert controller.state == FetchResult(status="success", items=())


@pytest.mark.asyncio
async def test_scenario_c_empty_submit_is_a_noop():
    search = StaticSearch([make_item("1")])
    controller = await _controller(search, default="")
    before = controller.state

    assert await controller.on_submit() is False

    assert search.queries == []
    assert controller.state is before
    assert controller.latest_tag == 0


@pytest.mark.asyncio
async def test_scenario_d_stale_response_is_discarded():
    search = FakeSearch()
    controller = await _controller(search, default="")

    controller.on_draft_change("foo")
    first = await _start(controller.on_submit())
    controller.on_draft_change("bar")
    second = await _start(controller.on_submit())
    assert search.queries == ["foo", "bar"]

    search.resolve(0, [make_item("foo-1")])
    assert await first is False
    assert controller.state.status == "loading"
    assert controller.state.items == ()

    search.resolve(1, [make_item("bar-1"), make_item("bar-2")])
    assert await second is True
    assert controller.state.status == "success"
    assert [item.id for item in controller.state.items] == ["bar-1", "bar-2"]
    assert controller.search_state.committed_query == "bar"


@pytest.mark.asyncio
async def test_stale_failure_is_discarded():
    search = FakeSearch()
    controller = await _controller(search)

    first = await _start(controller.on_submit())
    second = await _start(controller.on_submit())
    search.resolve(1, [make_item("1")])
    assert await second is True

    search.fail(0, SearchTransportError("late"))
    assert await first is False
    assert controller.state.status == "success"


@pytest.mark.asyncio
async def test_out_of_order_old_success_after_new_success_is_ignored():
    search = FakeSearch()
    controller = await _controller(search)

    first = await _start(controller.on_mount())
    second = await _start(controller.on_submit())
    search.resolve(1, [make_item("new")])
    await second
    search.resolve(0, [make_item("old")])
    await first

    assert [item.id for item in controller.state.items] == ["new"]


@pytest.mark.asyncio
async def test_failure_keeps_items_and_sets_error():
    search = StaticSearch([make_item("1")])
    controller = await _controller(search)
    await controller.on_mount()

    search.error = SearchTransportError("down")
    assert await controller.on_submit() is True

    assert controller.state.is_error
    assert [item.id for item in controller.state.items] == ["1"]


@pytest.mark.asyncio
async def test_loading_keeps_previous_items_visible():
    search = FakeSearch()
    controller = await _controller(search)
    first = await _start(controller.on_mount())
    search.resolve(0, [make_item("1")])
    await first

    pending = await _start(controller.on_submit())
    assert controller.state.is_loading
    assert [item.id for item in controller.state.items] == ["1"]
    search.resolve(1, [])
    await pending
    assert controller.state == FetchResult(status="success", items=())


@pytest.mark.asyncio
async def test_mount_fetches_persisted_draft():
    search = StaticSearch()
    controller = await _controller(search, stored="Django")

    await controller.on_mount()

    assert search.queries == ["Django"]
    assert controller.search_state.committed_query == "Django"


@pytest.mark.asyncio
async def test_draft_change_does_not_fetch_or_commit():
    search = StaticSearch()
    controller = await _controller(search)

    controller.on_draft_change("Rust")

    assert search.queries == []
    assert controller.search_state.draft_query == "Rust"
    assert controller.search_state.committed_query == "React"


@pytest.mark.asyncio
async def test_remove_does_not_fetch():
    search = StaticSearch([make_item("1"), make_item("2")])
    controller = await _controller(search)
    await controller.on_mount()

    controller.on_remove_item("2")
    controller.on_remove_item("missing")

    assert search.queries == ["React"]
    assert [item.id for item in controller.state.items] == ["1"]


@pytest.mark.asyncio
async def test_unexpected_search_errors_propagate():
    controller = await _controller(StaticSearch(error=RuntimeError("bug")))
    with pytest.raises(RuntimeError):
        await controller.on_mount()


@pytest.mark.asyncio
async def test_view_rows_dismiss_through_controller():
    controller = await _controller(StaticSearch([make_item("1"), make_item("2")]))
    await controller.on_mount()

    rows = list(controller.view())
    rows[0].dismiss()

    assert [item.id for item in controller.state.items] == ["2"]
