"""Key/value string stores backing persisted client state."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Callable, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from story_search.db.models.core import StoredValue
from story_search.services.exceptions import StoreUnavailable

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store, used for tests and when no database is configured."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlKeyValueStore:
    """Stores values in the ``stored_values`` table under one namespace."""

    def __init__(self, session_scope: SessionScope, namespace: str = "") -> None:
        self._session_scope = session_scope
        self.namespace = namespace

    async def get(self, key: str) -> str | None:
        stmt = select(StoredValue.value).where(
            StoredValue.namespace == self.namespace,
            StoredValue.key == key,
        )
        try:
            async with self._session_scope() as session:
                result = await session.execute(stmt)
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"Failed to read {key!r}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        stmt = select(StoredValue).where(
            StoredValue.namespace == self.namespace,
            StoredValue.key == key,
        )
        try:
            async with self._session_scope() as session:
                result = await session.execute(stmt)
                row = result.scalar_one_or_none()
                if row is None:
                    session.add(StoredValue(namespace=self.namespace, key=key, value=value))
                else:
                    row.value = value
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"Failed to write {key!r}: {exc}") from exc


__all__ = ["KeyValueStore", "MemoryStore", "SessionScope", "SqlKeyValueStore"]
