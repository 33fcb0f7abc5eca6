"""A single string value mirrored into a key/value store."""

from __future__ import annotations

import asyncio
from typing import Callable

from story_search.logging import logger
from story_search.services.exceptions import StoreUnavailable
from story_search.services.storage import KeyValueStore


class PersistentValue:
    """In-memory value whose every change is written back to ``store``.

    ``set`` is synchronous; writes are queued and applied one at a time by a
    background task, so the store always ends up holding the most recently
    set value. A failing store is logged once and then ignored for the rest
    of the session.
    """

    def __init__(self, store: KeyValueStore, key: str, value: str) -> None:
        self._store = store
        self.key = key
        self._value = value
        self._pending: asyncio.Queue[str] = asyncio.Queue()
        self._writer: asyncio.Task[None] | None = None
        self.degraded = False

    @classmethod
    async def create(cls, store: KeyValueStore, key: str, default: str) -> "PersistentValue":
        try:
            stored = await store.get(key)
        except StoreUnavailable as exc:
            logger.warning("persistent_value_read_failed", key=key, error=str(exc))
            instance = cls(store, key, default)
            instance.degraded = True
            return instance
        return cls(store, key, default if stored is None else stored)

    @property
    def value(self) -> str:
        return self._value

    def set(self, value: str) -> None:
        self._value = value
        if self.degraded:
            return
        self._pending.put_nowait(value)
        if self._writer is None or self._writer.done():
            self._writer = asyncio.get_running_loop().create_task(self._drain())

    def as_pair(self) -> tuple[str, Callable[[str], None]]:
        return self._value, self.set

    async def flush(self) -> None:
        """Wait until every queued write has been attempted."""

        await self._pending.join()

    async def _drain(self) -> None:
        while not self._pending.empty():
            value = self._pending.get_nowait()
            try:
                if not self.degraded:
                    await self._store.set(self.key, value)
            except StoreUnavailable as exc:
                self.degraded = True
                logger.warning("persistent_value_write_failed", key=self.key, error=str(exc))
            except Exception:
                self.degraded = True
                logger.exception("persistent_value_write_error", key=self.key)
            finally:
                self._pending.task_done()


__all__ = ["PersistentValue"]
