"""Hacker News search integration (Algolia API)."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from story_search.config import SearchApiSettings
from story_search.domain.models import Item
from story_search.logging import logger
from story_search.services.exceptions import SearchTransportError

_ITEMS = TypeAdapter(list[Item])


class SearchService:
    """Queries ``<base>/search`` and maps the returned hits to :class:`Item`.

    Every failure (network, timeout, non-2xx status, malformed body) is
    reported as :class:`SearchTransportError`. No retries are attempted.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: SearchApiSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or SearchApiSettings()

    @property
    def endpoint(self) -> str:
        return f"{str(self._settings.base_url).rstrip('/')}/search"

    async def search(self, query: str) -> list[Item]:
        try:
            response = await self._client.get(
                self.endpoint,
                params={"query": query},
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:500]
            raise SearchTransportError(
                f"Search request failed ({exc.response.status_code}): {detail}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SearchTransportError(f"Search request failed: {exc}") from exc

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise SearchTransportError("Search response is not valid JSON.") from exc

        hits = payload.get("hits") if isinstance(payload, dict) else None
        if not isinstance(hits, list):
            raise SearchTransportError("Search response has no hit list.")

        try:
            items = _ITEMS.validate_python(hits)
        except ValidationError as exc:
            raise SearchTransportError(f"Malformed search hit: {exc}") from exc

        logger.debug("search_completed", query=query, hits=len(items))
        return items


__all__ = ["SearchService"]
