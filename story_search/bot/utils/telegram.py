"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any

from aiogram.exceptions import TelegramNetworkError, TelegramRetryAfter, TelegramServerError
from aiogram.types import Message

from story_search.logging import logger
from story_search.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
# Client errors (bad request, forbidden) are not worth repeating.
TRANSIENT_ERRORS = (TelegramNetworkError, TelegramRetryAfter, TelegramServerError)


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a reply with retry/backoff."""

    async def _send():
        return await message.answer(text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        logger=logger,
        operation_name="telegram_answer",
        retry_on=TRANSIENT_ERRORS,
    )


async def edit_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Replace the text (and markup) of an already sent message."""

    async def _edit():
        return await message.edit_text(text, **kwargs)

    return await retry_async(
        _edit,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        logger=logger,
        operation_name="telegram_edit_text",
        retry_on=TRANSIENT_ERRORS,
    )


__all__ = ["answer_with_retry", "edit_with_retry"]
