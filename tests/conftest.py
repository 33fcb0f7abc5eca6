"""Shared pytest fixtures for store-backed and controller tests."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest_asyncio

from story_search.db.session import Database
from story_search.domain.models import Item


@pytest_asyncio.fixture
async def database():
    settings = SimpleNamespace(database=SimpleNamespace(dsn="sqlite+aiosqlite:///:memory:", echo=False))
    db = Database(settings=settings)
    await db.create_schema()
    try:
        yield db
    finally:
        await db.dispose()


def make_item(item_id: str, title: str = "T", **kwargs) -> Item:
    fields = {"url": "u", "author": "a", "comment_count": 0, "points": 0, **kwargs}
    return Item(id=item_id, title=title, **fields)


class FakeSearch:
    """Search backend whose calls resolve only when the test releases them."""

    def __init__(self) -> None:
        self.queries: list[str] = []
        self._pending: list[asyncio.Future] = []

    async def search(self, query: str) -> list[Item]:
        self.queries.append(query)
        future = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        return await future

    def resolve(self, index: int, items: list[Item]) -> None:
        self._pending[index].set_result(items)

    def fail(self, index: int, exc: Exception) -> None:
        self._pending[index].set_exception(exc)


class StaticSearch:
    def __init__(self, items: list[Item] | None = None, error: Exception | None = None) -> None:
        self.items = items or []
        self.error = error
        self.queries: list[str] = []

    async def search(self, query: str) -> list[Item]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.items)
