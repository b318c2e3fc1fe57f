from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True, slots=True)
class SearchHit:
    title: str
    url: str
    content: str


@dataclass(frozen=True, slots=True)
class FetchedPage:
    title: str
    url: str
    content: str


@dataclass(frozen=True, slots=True)
class Reference:
    url: str
    title: str


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Answer produced by one research task, with the pages that contributed to it."""

    answer: str
    references: tuple[Reference, ...] = ()
    failed: bool = False


@dataclass(frozen=True, slots=True)
class TaskOutcome:
    """Tagged success/failure of one task runner, so failures never cross the fan-out."""

    index: int
    result: TaskResult | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SelectedUrl(BaseModel):
    url: str = Field(description="The most relevant URL that can be used to get the content")


class UrlSelection(BaseModel):
    urls: list[SelectedUrl]


def hits_to_dicts(hits: list[SearchHit]) -> list[dict[str, str]]:
    """Convert SearchHit list to JSON-serializable dicts."""
    return [{"title": h.title, "url": h.url, "content": h.content} for h in hits]
