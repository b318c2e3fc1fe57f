from __future__ import annotations

from typing import Any, Callable

import pytest

from deep_research.config import ModelTiers, Settings
from deep_research.models.research import FetchedPage, SearchHit
from deep_research.models.research_plan import ResearchPlan, ResearchTask, TaskKind

MODELS = ModelTiers(fast="test/fast", flagship="test/flagship")


class FakeLLM:
    """Records every call; text answers come from `text_responder`, objects from `objects`."""

    def __init__(
        self,
        text_responder: Callable[[str], str] | None = None,
        objects: dict[type, Any] | None = None,
    ):
        self.text_calls: list[dict[str, Any]] = []
        self.object_calls: list[dict[str, Any]] = []
        self.text_responder = text_responder or (lambda prompt: f"generated text #{len(self.text_calls)}")
        self.objects = objects or {}

    async def generate_text(self, prompt: str, *, model: str, system: str | None = None, caller: str = "llm") -> str:
        self.text_calls.append({"prompt": prompt, "model": model, "system": system, "caller": caller})
        return self.text_responder(prompt)

    async def generate_object(
        self, prompt: str, schema: type, *, model: str, system: str | None = None, caller: str = "llm"
    ) -> Any:
        self.object_calls.append(
            {"prompt": prompt, "schema": schema, "model": model, "system": system, "caller": caller}
        )
        value = self.objects[schema]
        if isinstance(value, BaseException):
            raise value
        if callable(value):
            return value(prompt)
        return value


class FakeSearchProvider:
    """Serves fixed hit lists per page; pages not listed are empty."""

    def __init__(self, pages: dict[int, list[SearchHit]] | None = None):
        self.pages = pages or {}
        self.calls: list[tuple[str, int]] = []

    async def search(self, query: str, page: int) -> list[SearchHit]:
        self.calls.append((query, page))
        return list(self.pages.get(page, []))


class FakeFetcher:
    """Returns the configured page for a URL, or None for unknown URLs."""

    def __init__(self, pages: dict[str, FetchedPage | None] | None = None):
        self.pages = pages or {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> FetchedPage | None:
        self.calls.append(url)
        return self.pages.get(url)


def make_hit(n: int) -> SearchHit:
    return SearchHit(title=f"Result {n}", url=f"https://example.com/{n}", content=f"Snippet {n}")


def make_page(url: str, title: str = "Page", length: int = 500) -> FetchedPage:
    return FetchedPage(title=title, url=url, content="x" * length)


def make_task(kind: TaskKind = TaskKind.WEB, n: int = 1) -> ResearchTask:
    return ResearchTask(
        title=f"Task {n}",
        objectives=f"Objectives of task {n}",
        expected_outcomes=f"Outcomes of task {n}",
        kind=kind,
        query=f"query {n}",
    )


def make_plan(*kinds: TaskKind) -> ResearchPlan:
    kinds = kinds or (TaskKind.WEB, TaskKind.AI)
    return ResearchPlan(
        title="History of the printing press",
        language="English",
        objectives="Understand how the printing press was invented and spread.",
        expected_outcomes="A timeline of key inventors and the social impact of printing.",
        tasks=[make_task(kind, n) for n, kind in enumerate(kinds, 1)],
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, openrouter_api_key="test-key")
