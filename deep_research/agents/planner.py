from __future__ import annotations

from loguru import logger

from deep_research.errors import ConfigurationError, PlanningFailure
from deep_research.llm_client import LLMClient
from deep_research.models.research_plan import ResearchPlan
from deep_research.services.prompt_store import render_prompt


class PlanGenerator:
    """Turns the raw user query into a structured, ordered research plan."""

    name = "planner"

    def __init__(self, llm: LLMClient, model: str):
        self.llm = llm
        self.model = model

    async def generate(self, query: str) -> ResearchPlan:
        cleaned = query.strip()
        if not cleaned:
            raise PlanningFailure("Research query must not be empty")

        system = render_prompt("planner.system_prompt", query=cleaned)
        try:
            plan = await self.llm.generate_object(
                cleaned,
                ResearchPlan,
                model=self.model,
                system=system,
                caller=self.name,
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            raise PlanningFailure(f"Could not generate research plan: {exc}") from exc

        logger.info(
            f"Plan '{plan.title}' ({plan.language}): {len(plan.web_tasks)} web task(s), "
            f"{len(plan.ai_tasks)} ai task(s)"
        )
        return plan
