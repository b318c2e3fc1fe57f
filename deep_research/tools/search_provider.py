from __future__ import annotations

from typing import Any, Protocol

import httpx
from loguru import logger

from deep_research.config import settings
from deep_research.errors import SourceUnavailable
from deep_research.models.research import SearchHit


class SearchProvider(Protocol):
    async def search(self, query: str, page: int) -> list[SearchHit]: ...


class SearxSearchProvider:
    """SearxNG-compatible JSON search endpoint.

    Any failure for a page (non-2xx, transport error, timeout, bad JSON) yields an
    empty page, which callers treat as the end of pagination.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.search_base_url
        self.timeout = timeout if timeout is not None else settings.search_timeout_seconds

    async def _fetch_page(self, query: str, page: int) -> dict[str, Any]:
        params = {"q": query, "format": "json", "safesearch": 0, "pageno": page}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.base_url,
                    params=params,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SourceUnavailable(f"search page {page} for '{query}' failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise SourceUnavailable(f"search page {page} for '{query}' returned {type(payload).__name__}")
        return payload

    async def search(self, query: str, page: int) -> list[SearchHit]:
        """Execute one page of a web search and normalize results."""
        try:
            payload = await self._fetch_page(query, page)
        except SourceUnavailable as exc:
            logger.warning(str(exc))
            return []

        hits: list[SearchHit] = []
        for item in payload.get("results") or []:
            if not isinstance(item, dict):
                continue
            hits.append(
                SearchHit(
                    title=str(item.get("title", "") or ""),
                    url=str(item.get("url", "") or ""),
                    content=str(item.get("content", "") or ""),
                )
            )
        return hits
