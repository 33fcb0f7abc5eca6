"""Plain-text rendering of the search page."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

from story_search.domain.models import Item, SearchState
from story_search.state.fetch import FetchResult

HEADLINE = "HackerNews Story Search"
LOADING_TEXT = "Loading...."
ERROR_TEXT = "Something went wrong..."
EMPTY_TEXT = "No stories."


@dataclass(frozen=True, slots=True)
class ItemRow:
    item: Item
    on_remove: Callable[[str], None]

    @property
    def item_id(self) -> str:
        return self.item.id

    def dismiss(self) -> None:
        self.on_remove(self.item.id)

    def format(self) -> str:
        item = self.item
        title = item.title or "(untitled)"
        lines = [title]
        if item.url:
            lines.append(item.url)
        lines.append(
            f"by {item.author or 'unknown'} | {item.comment_count} comments | {item.points} points"
        )
        return "\n".join(lines)


class ItemListView:
    """One row per item; iterating again re-derives the rows from ``items``."""

    def __init__(self, items: Sequence[Item], on_remove: Callable[[str], None]) -> None:
        self._items = items
        self._on_remove = on_remove

    def __iter__(self) -> Iterator[ItemRow]:
        for item in self._items:
            yield ItemRow(item=item, on_remove=self._on_remove)

    def __len__(self) -> int:
        return len(self._items)


def render_page(search_state: SearchState, result: FetchResult) -> str:
    """Render headline, status line and the item rows for ``result``."""

    parts = [HEADLINE, f"Search: {search_state.draft_query}"]
    if result.is_error:
        parts.append(ERROR_TEXT)
    if result.is_loading:
        parts.append(LOADING_TEXT)
        return "\n\n".join(parts)

    rows = ItemListView(result.items, lambda _item_id: None)
    if len(rows) == 0:
        if result.status == "success":
            parts.append(EMPTY_TEXT)
        return "\n\n".join(parts)

    parts.extend(
        f"{index}. {row.format()}" for index, row in enumerate(rows, start=1)
    )
    return "\n\n".join(parts)


__all__ = [
    "EMPTY_TEXT",
    "ERROR_TEXT",
    "HEADLINE",
    "ItemListView",
    "ItemRow",
    "LOADING_TEXT",
    "render_page",
]
