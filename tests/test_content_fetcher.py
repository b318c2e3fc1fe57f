from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from deep_research.config import Settings
from deep_research.errors import ConfigurationError
from deep_research.tools.content_extractor import ExtractedContent
from deep_research.tools.content_fetcher import (
    DirectContentFetcher,
    UrlParserContentFetcher,
    build_content_fetcher,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", url="https://example.com/a"):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.url = url

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeClient:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests: list[dict] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def get(self, url, **kwargs):
        self.requests.append({"url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response


def _patch_client(client: FakeClient):
    return patch("deep_research.tools.content_fetcher.httpx.AsyncClient", return_value=client)


class TestUrlParserContentFetcher:
    @pytest.mark.asyncio
    async def test_fetch_returns_page_for_valid_content(self):
        payload = {"title": "Gutenberg", "url": "https://example.com/a", "content": "c" * 150}
        client = FakeClient(FakeResponse(payload=payload))

        with _patch_client(client):
            fetcher = UrlParserContentFetcher(base_url="https://parser.test/", min_content_length=100)
            page = await fetcher.fetch("https://example.com/a")

        assert page is not None
        assert page.title == "Gutenberg"
        assert len(page.content) == 150
        assert client.requests[0]["params"] == {"url": "https://example.com/a"}

    @pytest.mark.asyncio
    async def test_fetch_drops_short_content(self):
        payload = {"title": "Stub", "url": "https://example.com/a", "content": "c" * 99}

        with _patch_client(FakeClient(FakeResponse(payload=payload))):
            page = await UrlParserContentFetcher(min_content_length=100).fetch("https://example.com/a")

        assert page is None

    @pytest.mark.asyncio
    async def test_fetch_drops_missing_content(self):
        with _patch_client(FakeClient(FakeResponse(payload={"title": "Empty"}))):
            page = await UrlParserContentFetcher().fetch("https://example.com/a")

        assert page is None

    @pytest.mark.asyncio
    async def test_fetch_drops_non_200(self):
        payload = {"title": "x", "content": "c" * 500}

        with _patch_client(FakeClient(FakeResponse(status_code=404, payload=payload))):
            page = await UrlParserContentFetcher().fetch("https://example.com/a")

        assert page is None

    @pytest.mark.asyncio
    async def test_fetch_drops_transport_errors(self):
        with _patch_client(FakeClient(error=httpx.ConnectTimeout("slow"))):
            page = await UrlParserContentFetcher().fetch("https://example.com/a")

        assert page is None

    @pytest.mark.asyncio
    async def test_fetch_drops_invalid_json(self):
        with _patch_client(FakeClient(FakeResponse(payload=ValueError("bad json")))):
            page = await UrlParserContentFetcher().fetch("https://example.com/a")

        assert page is None

    @pytest.mark.asyncio
    async def test_fetch_skips_invalid_url_without_request(self):
        client = FakeClient(FakeResponse(payload={}))

        with _patch_client(client):
            page = await UrlParserContentFetcher().fetch("not a url")

        assert page is None
        assert client.requests == []


class TestDirectContentFetcher:
    @pytest.mark.asyncio
    async def test_fetch_extracts_main_text(self):
        html = "<html><head><title>T</title></head><body><p>body</p></body></html>"
        client = FakeClient(FakeResponse(text=html))
        extracted = ExtractedContent(
            url="https://example.com/a", title="Movable type", text="t" * 300, method="trafilatura"
        )

        with (
            _patch_client(client),
            patch("deep_research.tools.content_fetcher.extract_main_content", return_value=extracted) as extract,
        ):
            page = await DirectContentFetcher(min_content_length=100).fetch("https://example.com/a")

        assert page is not None
        assert page.title == "Movable type"
        assert page.url == "https://example.com/a"
        extract.assert_called_once_with("https://example.com/a", html)

    @pytest.mark.asyncio
    async def test_fetch_uses_domain_when_title_missing(self):
        extracted = ExtractedContent(url="https://example.com/a", title="", text="t" * 300, method="soup")

        with (
            _patch_client(FakeClient(FakeResponse(text="<html></html>"))),
            patch("deep_research.tools.content_fetcher.extract_main_content", return_value=extracted),
        ):
            page = await DirectContentFetcher().fetch("https://example.com/a")

        assert page is not None
        assert page.title == "example.com"

    @pytest.mark.asyncio
    async def test_fetch_drops_extraction_errors(self):
        with (
            _patch_client(FakeClient(FakeResponse(text="<html></html>"))),
            patch(
                "deep_research.tools.content_fetcher.extract_main_content",
                side_effect=RuntimeError("parser crashed"),
            ),
        ):
            page = await DirectContentFetcher().fetch("https://example.com/a")

        assert page is None


class TestBuildContentFetcher:
    def test_builds_urlparser_backend(self):
        cfg = Settings(_env_file=None, fetcher_backend="urlparser", fetcher_base_url="https://p.test/")
        fetcher = build_content_fetcher(cfg)
        assert isinstance(fetcher, UrlParserContentFetcher)
        assert fetcher.base_url == "https://p.test/"

    def test_builds_direct_backend(self):
        cfg = Settings(_env_file=None, fetcher_backend="direct", min_content_length=250)
        fetcher = build_content_fetcher(cfg)
        assert isinstance(fetcher, DirectContentFetcher)
        assert fetcher.min_content_length == 250

    def test_rejects_unknown_backend(self):
        with pytest.raises(ConfigurationError):
            build_content_fetcher(Settings(_env_file=None, fetcher_backend="carrier-pigeon"))
