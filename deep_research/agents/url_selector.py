"""Model-driven URL selection for web research tasks."""

from __future__ import annotations

import json

from deep_research.llm_client import LLMClient
from deep_research.models.research import SearchHit, UrlSelection, hits_to_dicts
from deep_research.services.prompt_store import render_prompt


class URLSelector:
    """Picks the search hits most likely to satisfy a research objective.

    The model decides how many URLs to return, including none. The order it
    returns is kept as-is.
    """

    name = "url_selector"

    def __init__(self, llm: LLMClient, model: str):
        self.llm = llm
        self.model = model

    def build_prompt(self, hits: list[SearchHit], objectives: str) -> str:
        return render_prompt(
            "url_selector.prompt",
            objectives=objectives,
            results=json.dumps(hits_to_dicts(hits), ensure_ascii=False),
        )

    async def select(self, hits: list[SearchHit], objectives: str) -> list[str]:
        if not hits:
            return []

        selection = await self.llm.generate_object(
            self.build_prompt(hits, objectives),
            UrlSelection,
            model=self.model,
            caller=self.name,
        )
        return [item.url for item in selection.urls]
