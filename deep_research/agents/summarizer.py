from __future__ import annotations

from loguru import logger

from deep_research.config import settings
from deep_research.llm_client import LLMClient
from deep_research.services.concurrency import gather_bounded
from deep_research.services.prompt_store import render_prompt


def chunk_text(text: str, chunk_size: int) -> list[str]:
    """Split text into fixed-size slices; the last one may be shorter."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    return [text[start : start + chunk_size] for start in range(0, len(text), chunk_size)]


class HierarchicalSummarizer:
    """Map-then-reduce summarization that keeps every model call within a bounded input."""

    name = "summarizer"

    def __init__(
        self,
        llm: LLMClient,
        model: str,
        *,
        chunk_size: int | None = None,
        max_parallel: int | None = None,
    ):
        self.llm = llm
        self.model = model
        self.chunk_size = chunk_size or settings.summary_chunk_size
        self.max_parallel = max_parallel if max_parallel is not None else settings.max_parallel_summaries

    async def _summarize_chunk(
        self, chunk: str, index: int, total: int, title: str, objectives: str
    ) -> str:
        prompt = render_prompt(
            "summarizer.chunk_prompt",
            title=title,
            part=index + 1,
            total=total,
            objectives=objectives,
            chunk=chunk,
        )
        return await self.llm.generate_text(prompt, model=self.model, caller=f"{self.name}.chunk")

    async def summarize(self, content: str, title: str, url: str, objectives: str) -> str:
        chunks = chunk_text(content, self.chunk_size)
        if not chunks:
            return ""

        logger.debug(f"Summarizing {url} in {len(chunks)} chunk(s)")
        summaries = await gather_bounded(
            (
                self._summarize_chunk(chunk, index, len(chunks), title, objectives)
                for index, chunk in enumerate(chunks)
            ),
            self.max_parallel,
        )
        if len(summaries) == 1:
            return summaries[0]

        logger.debug(f"Combining {len(summaries)} summaries from {url}")
        prompt = render_prompt(
            "summarizer.combine_prompt",
            title=title,
            objectives=objectives,
            summaries="\n\n".join(summaries),
        )
        return await self.llm.generate_text(prompt, model=self.model, caller=f"{self.name}.combine")
