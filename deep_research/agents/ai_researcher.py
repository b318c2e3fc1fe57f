from __future__ import annotations

from deep_research.llm_client import LLMClient
from deep_research.models.events import ProgressCallback
from deep_research.models.research import TaskResult
from deep_research.models.research_plan import ResearchTask
from deep_research.services import logger as log_service


class ModelOnlyResearchRunner:
    """Answers an `ai` task by sending its query to the model as the whole prompt."""

    name = "ai_researcher"

    def __init__(self, llm: LLMClient, model: str):
        self.llm = llm
        self.model = model

    async def run(self, task: ResearchTask, progress: ProgressCallback | None = None) -> TaskResult:
        if progress:
            progress("asking_model")
        answer = await self.llm.generate_text(task.query, model=self.model, caller=self.name)
        log_service.log_research_step(self.name, "completed", {"title": task.title, "chars": len(answer)})
        return TaskResult(answer=answer)
