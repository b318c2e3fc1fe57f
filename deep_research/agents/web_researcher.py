from __future__ import annotations

from typing import Any

from loguru import logger

from deep_research.agents.summarizer import HierarchicalSummarizer
from deep_research.agents.url_selector import URLSelector
from deep_research.config import settings
from deep_research.llm_client import LLMClient
from deep_research.models.events import ProgressCallback
from deep_research.models.research import FetchedPage, Reference, SearchHit, TaskResult
from deep_research.models.research_plan import ResearchTask
from deep_research.services import logger as log_service
from deep_research.services.concurrency import gather_bounded
from deep_research.services.prompt_store import render_prompt
from deep_research.tools import web_utils
from deep_research.tools.content_fetcher import ContentFetcher
from deep_research.tools.search_provider import SearchProvider


def _noop_progress(status: str, **data: Any) -> None:
    return None


class WebResearchRunner:
    """Executes one web task: search, select URLs, fetch, summarize, synthesize."""

    name = "web_researcher"

    def __init__(
        self,
        llm: LLMClient,
        model: str,
        search_provider: SearchProvider,
        fetcher: ContentFetcher,
        url_selector: URLSelector,
        summarizer: HierarchicalSummarizer,
        *,
        max_pages: int | None = None,
        max_parallel_fetches: int | None = None,
        deduplicate_urls: bool | None = None,
    ):
        self.llm = llm
        self.model = model
        self.search_provider = search_provider
        self.fetcher = fetcher
        self.url_selector = url_selector
        self.summarizer = summarizer
        self.max_pages = max_pages if max_pages is not None else settings.search_max_pages
        self.max_parallel_fetches = (
            max_parallel_fetches if max_parallel_fetches is not None else settings.max_parallel_fetches
        )
        self.deduplicate_urls = (
            deduplicate_urls if deduplicate_urls is not None else settings.deduplicate_urls
        )

    async def search(self, query: str, progress: ProgressCallback = _noop_progress) -> list[SearchHit]:
        """Accumulate hits page by page until an empty page or the page cap."""
        hits: list[SearchHit] = []
        for page in range(1, self.max_pages + 1):
            progress("searching", query=query, page=page, max_pages=self.max_pages)
            page_hits = await self.search_provider.search(query, page)
            if not page_hits:
                break
            hits.extend(page_hits)

        if self.deduplicate_urls:
            hits = web_utils.dedupe_by_url(hits, key=lambda hit: hit.url)
        return hits

    async def fetch_pages(
        self, urls: list[str], progress: ProgressCallback = _noop_progress
    ) -> list[FetchedPage]:
        if self.deduplicate_urls:
            urls = web_utils.dedupe_by_url(urls, key=lambda url: url)

        async def fetch_one(url: str) -> FetchedPage | None:
            progress("fetching", url=url)
            return await self.fetcher.fetch(url)

        pages = await gather_bounded((fetch_one(url) for url in urls), self.max_parallel_fetches)
        return [page for page in pages if page is not None]

    async def run(self, task: ResearchTask, progress: ProgressCallback | None = None) -> TaskResult:
        report = progress or _noop_progress

        hits = await self.search(task.query, report)
        logger.info(f"[{task.title}] {len(hits)} search hit(s) for '{task.query}'")

        report("selecting_urls", hits=len(hits))
        urls = await self.url_selector.select(hits, task.objectives)

        pages = await self.fetch_pages(urls, report)
        logger.info(f"[{task.title}] {len(pages)}/{len(urls)} selected page(s) fetched")

        report("summarizing", pages=len(pages))
        summaries = await gather_bounded(
            self.summarizer.summarize(page.content, page.title, page.url, task.objectives)
            for page in pages
        )

        report("synthesizing")
        prompt = render_prompt(
            "web_researcher.answer_prompt",
            title=task.title,
            objectives=task.objectives,
            expected_outcomes=task.expected_outcomes,
            summaries="\n\n".join(summaries),
        )
        answer = await self.llm.generate_text(prompt, model=self.model, caller=self.name)

        references = tuple(Reference(url=page.url, title=page.title) for page in pages)
        log_service.log_research_step(
            self.name,
            "completed",
            {"title": task.title, "hits": len(hits), "selected": len(urls), "references": len(references)},
        )
        return TaskResult(answer=answer, references=references)
