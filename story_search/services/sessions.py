"""Per-chat search pages."""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import Callable

from story_search.config import SearchSettings
from story_search.logging import logger
from story_search.services.query import QueryController, SearchBackend
from story_search.services.storage import KeyValueStore
from story_search.state.persistent import PersistentValue

StoreFactory = Callable[[str], KeyValueStore]


class SearchSessionRegistry:
    """Creates one :class:`QueryController` per chat on first use.

    At most ``settings.max_sessions`` pages are kept; the least recently used
    one is dropped after its pending draft writes are flushed. A dropped chat
    starts over from its persisted draft on the next message.
    """

    def __init__(
        self,
        search: SearchBackend,
        store_factory: StoreFactory,
        settings: SearchSettings | None = None,
    ) -> None:
        self._search = search
        self._store_factory = store_factory
        self._settings = settings or SearchSettings()
        self._sessions: OrderedDict[int, tuple[QueryController, PersistentValue]] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, chat_id: int) -> QueryController | None:
        entry = self._sessions.get(chat_id)
        if entry is None:
            return None
        self._sessions.move_to_end(chat_id)
        return entry[0]

    async def controller_for(self, chat_id: int) -> QueryController:
        controller = self.get(chat_id)
        if controller is not None:
            return controller
        async with self._lock:
            controller = self.get(chat_id)
            if controller is None:
                store = self._store_factory(str(chat_id))
                draft = await PersistentValue.create(
                    store, self._settings.storage_key, self._settings.default_query
                )
                controller = QueryController(self._search, draft)
                self._sessions[chat_id] = (controller, draft)
                logger.info("search_session_created", chat_id=chat_id, draft=draft.value)
                await self._evict_overflow()
        return controller

    async def flush(self) -> None:
        for _controller, draft in list(self._sessions.values()):
            await draft.flush()

    async def _evict_overflow(self) -> None:
        while len(self._sessions) > self._settings.max_sessions:
            chat_id, (_controller, draft) = self._sessions.popitem(last=False)
            await draft.flush()
            logger.info("search_session_evicted", chat_id=chat_id)


__all__ = ["SearchSessionRegistry", "StoreFactory"]
