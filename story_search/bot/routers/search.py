"""Telegram handlers driving one search page per chat."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any, Callable, Coroutine

from aiogram import F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandStart
from aiogram.types import CallbackQuery, InaccessibleMessage, Message

from story_search.bot.utils.messages import dismiss_keyboard, page_text, parse_dismiss_data
from story_search.bot.utils.telegram import answer_with_retry, edit_with_retry
from story_search.config import get_settings
from story_search.i18n import I18nService
from story_search.logging import logger
from story_search.services.query import QueryController
from story_search.services.sessions import SearchSessionRegistry
from story_search.state.fetch import FetchStart, apply

router = Router()


def _i18n() -> I18nService:
    return I18nService(default_locale=get_settings().default_language)


def _locale(message: Message | CallbackQuery) -> str | None:
    from_user = getattr(message, "from_user", None)
    return getattr(from_user, "language_code", None)


@router.message(CommandStart())
async def handle_start(message: Message, sessions: SearchSessionRegistry) -> None:
    controller = await sessions.controller_for(message.chat.id)
    name = message.from_user.full_name if message.from_user else ""
    greeting = _i18n().gettext("start.greeting", locale=_locale(message), name=name)
    await answer_with_retry(message, greeting, parse_mode=None)
    await _run_and_render(message, controller, controller.on_mount)


@router.message(Command("search"))
async def handle_search(message: Message, sessions: SearchSessionRegistry) -> None:
    controller = await sessions.controller_for(message.chat.id)
    if not controller.search_state.draft_query:
        text = _i18n().gettext("search.empty_draft", locale=_locale(message))
        await answer_with_retry(message, text, parse_mode=None)
        return
    await _run_and_render(message, controller, controller.on_submit)


@router.message(Command("help"))
async def handle_help(message: Message) -> None:
    text = _i18n().gettext("search.usage", locale=_locale(message))
    await answer_with_retry(message, text, parse_mode=None)


@router.message(F.text & ~F.text.startswith("/"))
async def handle_draft(message: Message, sessions: SearchSessionRegistry) -> None:
    controller = await sessions.controller_for(message.chat.id)
    controller.on_draft_change(message.text.strip())
    text = _i18n().gettext(
        "draft.saved", locale=_locale(message), draft=controller.search_state.draft_query
    )
    await answer_with_retry(message, text, parse_mode=None)


@router.callback_query(F.data.startswith("dismiss:"))
async def handle_dismiss(callback: CallbackQuery, sessions: SearchSessionRegistry) -> None:
    i18n = _i18n()
    item_id = parse_dismiss_data(callback.data)
    chat = callback.message.chat if callback.message else None
    controller = sessions.get(chat.id) if chat else None
    if controller is None or item_id is None:
        await callback.answer(i18n.gettext("dismiss.unknown", locale=_locale(callback)))
        return

    controller.on_remove_item(item_id)
    logger.info("item_dismissed", chat_id=chat.id, item_id=item_id)
    if controller.state.is_loading or isinstance(callback.message, InaccessibleMessage):
        # A pending cycle renders its own message; an inaccessible one cannot be edited.
        logger.info("dismiss_render_skipped", chat_id=chat.id, item_id=item_id)
    else:
        try:
            await edit_with_retry(
                callback.message,
                page_text(controller.search_state, controller.state),
                reply_markup=dismiss_keyboard(controller.view()),
                parse_mode=None,
            )
        except TelegramAPIError:
            logger.warning(
                "dismiss_render_failed", chat_id=chat.id, item_id=item_id, exc_info=True
            )
    await callback.answer(i18n.gettext("dismiss.done", locale=_locale(callback)))


async def _run_and_render(
    message: Message,
    controller: QueryController,
    cycle: Callable[[], Coroutine[Any, Any, bool]],
) -> None:
    """Show the loading page, run one fetch cycle and render its outcome."""

    preview = apply(controller.state, FetchStart())
    # The cycle claims its sequence tag as soon as this handler first yields.
    cycle_task = asyncio.create_task(cycle())
    loading = await answer_with_retry(
        message, page_text(controller.search_state, preview), parse_mode=None
    )
    applied = await cycle_task
    if not applied:
        # A newer cycle owns the page now; its own message shows the result.
        with contextlib.suppress(TelegramAPIError):
            await loading.delete()
        return
    await edit_with_retry(
        loading,
        page_text(controller.search_state, controller.state),
        reply_markup=dismiss_keyboard(controller.view()),
        parse_mode=None,
    )


__all__ = ["router", "handle_dismiss", "handle_draft", "handle_help", "handle_search", "handle_start"]
