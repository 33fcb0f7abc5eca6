"""Draft/committed query handling and fetch-cycle orchestration."""

from __future__ import annotations

from typing import Protocol

from story_search.domain.models import Item, SearchState
from story_search.logging import logger
from story_search.services.exceptions import SearchTransportError
from story_search.state.fetch import (
    FetchFailure,
    FetchResult,
    FetchStart,
    FetchStateMachine,
    FetchSuccess,
    RemoveItem,
)
from story_search.state.persistent import PersistentValue
from story_search.views.item_list import ItemListView


class SearchBackend(Protocol):
    async def search(self, query: str) -> list[Item]: ...


class QueryController:
    """Owns the search state of one page and drives its fetch cycles.

    The draft lives in a :class:`PersistentValue`; the committed query is the
    one the latest cycle was issued for. Every cycle gets a sequence tag when
    it starts and its outcome is only applied while that tag is still the
    newest, so a slow response can never overwrite a newer one.
    """

    def __init__(
        self,
        search: SearchBackend,
        draft: PersistentValue,
        machine: FetchStateMachine | None = None,
    ) -> None:
        self._search = search
        self._draft = draft
        self._machine = machine or FetchStateMachine()
        self._committed = draft.value
        self._latest_tag = 0

    @property
    def search_state(self) -> SearchState:
        return SearchState(draft_query=self._draft.value, committed_query=self._committed)

    @property
    def state(self) -> FetchResult:
        return self._machine.state

    @property
    def latest_tag(self) -> int:
        return self._latest_tag

    def on_draft_change(self, text: str) -> None:
        self._draft.set(text)

    async def on_submit(self) -> bool:
        """Commit the draft and fetch it; returns whether the outcome was applied."""

        draft = self._draft.value
        if not draft:
            logger.debug("submit_ignored_empty_draft")
            return False
        self._committed = draft
        return await self._run_cycle(draft)

    async def on_mount(self) -> bool:
        return await self._run_cycle(self._committed)

    def on_remove_item(self, item_id: str) -> None:
        self._machine.dispatch(RemoveItem(item_id))

    def view(self) -> ItemListView:
        return ItemListView(self.state.items, self.on_remove_item)

    async def _run_cycle(self, query: str) -> bool:
        self._latest_tag += 1
        tag = self._latest_tag
        self._machine.dispatch(FetchStart())
        logger.info("fetch_cycle_started", tag=tag, query=query)

        try:
            items = await self._search.search(query)
        except SearchTransportError as exc:
            if tag != self._latest_tag:
                logger.info("fetch_cycle_discarded", tag=tag, latest=self._latest_tag)
                return False
            logger.warning("fetch_cycle_failed", tag=tag, query=query, error=str(exc))
            self._machine.dispatch(FetchFailure())
            return True

        if tag != self._latest_tag:
            logger.info("fetch_cycle_discarded", tag=tag, latest=self._latest_tag)
            return False
        self._machine.dispatch(FetchSuccess.of(items))
        logger.info("fetch_cycle_succeeded", tag=tag, query=query, items=len(items))
        return True


__all__ = ["QueryController", "SearchBackend"]
