"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession

from story_search.bot.routers import setup_routers
from story_search.config import get_settings
from story_search.db.session import Database
from story_search.logging import configure_logging, logger
from story_search.services.search import SearchService
from story_search.services.sessions import SearchSessionRegistry
from story_search.services.storage import SqlKeyValueStore


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.telegram_token is None:
        raise RuntimeError("SEARCH_TELEGRAM_TOKEN is not configured.")

    database = Database(settings=settings)
    await database.create_schema()

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(token=settings.telegram_token.get_secret_value(), session=session)
    dp = Dispatcher()
    dp.include_router(setup_routers())

    async with httpx.AsyncClient() as http_client:
        search = SearchService(http_client, settings=settings.api)
        sessions = SearchSessionRegistry(
            search,
            lambda namespace: SqlKeyValueStore(database.session, namespace),
            settings=settings.search,
        )
        logger.info(
            "bot_starting",
            environment=settings.environment,
            search_endpoint=search.endpoint,
        )
        try:
            await dp.start_polling(bot, sessions=sessions)
        finally:
            await sessions.flush()
            await database.dispose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
