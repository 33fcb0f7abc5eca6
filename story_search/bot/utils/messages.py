"""Telegram presentation of the search page."""

from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from story_search.domain.models import SearchState
from story_search.state.fetch import FetchResult
from story_search.views.item_list import ItemListView, render_page

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900
DISMISS_PREFIX = "dismiss:"
BUTTON_TITLE_LIMIT = 28


def page_text(search_state: SearchState, result: FetchResult) -> str:
    text = render_page(search_state, result)
    if len(text) <= TELEGRAM_MESSAGE_LIMIT:
        return text
    return text[: TELEGRAM_MESSAGE_LIMIT - 1].rstrip() + "…"


def dismiss_keyboard(view: ItemListView) -> InlineKeyboardMarkup | None:
    """One "Dismiss" button per row, in row order."""

    buttons = []
    for index, row in enumerate(view, start=1):
        title = row.item.title or row.item_id
        if len(title) > BUTTON_TITLE_LIMIT:
            title = title[: BUTTON_TITLE_LIMIT - 1] + "…"
        buttons.append(
            [
                InlineKeyboardButton(
                    text=f"Dismiss {index}. {title}",
                    callback_data=f"{DISMISS_PREFIX}{row.item_id}",
                )
            ]
        )
    if not buttons:
        return None
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def parse_dismiss_data(data: str | None) -> str | None:
    if not data or not data.startswith(DISMISS_PREFIX):
        return None
    item_id = data[len(DISMISS_PREFIX):]
    return item_id or None


__all__ = [
    "DISMISS_PREFIX",
    "TELEGRAM_MESSAGE_LIMIT",
    "dismiss_keyboard",
    "page_text",
    "parse_dismiss_data",
]
