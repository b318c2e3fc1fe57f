from __future__ import annotations

from typing import Protocol

import httpx
from loguru import logger

from deep_research.config import Settings, settings
from deep_research.errors import ConfigurationError, SourceUnavailable
from deep_research.models.research import FetchedPage
from deep_research.tools import web_utils
from deep_research.tools.content_extractor import extract_main_content

USER_AGENT = "Mozilla/5.0 (compatible; deep-research/0.1)"


class ContentFetcher(Protocol):
    async def fetch(self, url: str) -> FetchedPage | None: ...


class _BaseFetcher:
    """Shared validity rule: a page is usable only with enough content."""

    def __init__(self, timeout: float | None = None, min_content_length: int | None = None):
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self.min_content_length = (
            min_content_length if min_content_length is not None else settings.min_content_length
        )

    async def _load(self, url: str) -> FetchedPage:
        raise NotImplementedError

    async def fetch(self, url: str) -> FetchedPage | None:
        """Resolve a URL into page text, or None when nothing usable came back."""
        if not web_utils.is_valid_url(url):
            logger.debug(f"Skipping invalid URL: {url!r}")
            return None
        try:
            page = await self._load(url)
        except SourceUnavailable as exc:
            logger.debug(str(exc))
            return None
        except httpx.HTTPError as exc:
            logger.debug(f"Fetch failed for {url}: {exc}")
            return None
        except Exception as exc:
            # Extraction errors count as an unusable page, same as a failed request.
            logger.warning(f"Unexpected error fetching {url}: {exc}")
            return None

        if len(page.content) < self.min_content_length:
            logger.debug(f"Dropping {url}: content too short ({len(page.content)} chars)")
            return None
        return page


class UrlParserContentFetcher(_BaseFetcher):
    """Delegates readability extraction to a URL parser service returning JSON."""

    def __init__(self, base_url: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.fetcher_base_url

    async def _load(self, url: str) -> FetchedPage:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(self.base_url, params={"url": url})
        if response.status_code != 200:
            raise SourceUnavailable(f"Parser returned {response.status_code} for {url}")
        try:
            data = response.json()
        except ValueError as exc:
            raise SourceUnavailable(f"Parser returned invalid JSON for {url}") from exc
        if not isinstance(data, dict):
            raise SourceUnavailable(f"Parser returned {type(data).__name__} for {url}")

        return FetchedPage(
            title=str(data.get("title", "") or ""),
            url=str(data.get("url", "") or url),
            content=str(data.get("content", "") or ""),
        )


class DirectContentFetcher(_BaseFetcher):
    """Downloads the page itself and extracts the main text locally."""

    async def _load(self, url: str) -> FetchedPage:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            response = await client.get(url)
        if response.status_code != 200:
            raise SourceUnavailable(f"Got {response.status_code} for {url}")

        extracted = extract_main_content(str(response.url), response.text)
        return FetchedPage(
            title=extracted.title or web_utils.extract_domain(url),
            url=url,
            content=extracted.text,
        )


def build_content_fetcher(config: Settings | None = None) -> ContentFetcher:
    cfg = config or settings
    backend = cfg.fetcher_backend.lower().strip()
    if backend == "urlparser":
        return UrlParserContentFetcher(
            base_url=cfg.fetcher_base_url,
            timeout=cfg.fetch_timeout_seconds,
            min_content_length=cfg.min_content_length,
        )
    if backend == "direct":
        return DirectContentFetcher(
            timeout=cfg.fetch_timeout_seconds,
            min_content_length=cfg.min_content_length,
        )
    raise ConfigurationError(f"Unsupported FETCHER_BACKEND: {cfg.fetcher_backend}")
