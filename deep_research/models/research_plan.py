from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TaskKind(str, Enum):
    WEB = "web"
    AI = "ai"


class ResearchTask(BaseModel):
    """A single unit of research, executed either by web search or by asking the model."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(
        description=(
            "What is currently being researched, in active voice. Example: Find information "
            "on the current status of CBDC development and implementation in Indonesia."
        )
    )
    objectives: str = Field(
        description="The objectives of this task. What key questions should be answered?"
    )
    expected_outcomes: str = Field(
        alias="expectedOutcomes",
        description=(
            "The expected outcomes of this task. What insights, conclusions, or "
            "applications do you anticipate?"
        ),
    )
    kind: TaskKind = Field(
        description=(
            "Use 'web' when the task needs external or current information; it will be "
            "executed by searching the web and summarizing the pages found. Use 'ai' when "
            "the task is reasoning or summarization over already-known information; it "
            "will be executed by asking the AI directly."
        )
    )
    query: str = Field(
        description=(
            "For 'web' tasks, the search engine query, written in the language detected "
            "from the user's query so the search engine can find relevant pages. For 'ai' "
            "tasks, the question to ask the AI."
        )
    )


class ResearchPlan(BaseModel):
    """A structured decomposition of the user's query into ordered research tasks."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(
        description=(
            "A title describing the research itself. Do not add 'Research Plan' to the title."
        )
    )
    language: str = Field(
        description="The language of the research report, based on the language of the query."
    )
    objectives: str = Field(
        description="The objectives of the research. What key questions should be answered?"
    )
    expected_outcomes: str = Field(
        alias="expectedOutcomes",
        description=(
            "The expected outcomes of the research. What insights, conclusions, or "
            "applications do you anticipate?"
        ),
    )
    tasks: list[ResearchTask] = Field(
        description=(
            "Ordered research tasks, each conducted with either a web search or a "
            "consultation with the AI. Keep the plan detailed and comprehensive but keep "
            "each task narrow in scope; reserve anything too broad for a later plan."
        ),
        min_length=1,
    )

    @property
    def web_tasks(self) -> list[ResearchTask]:
        return [task for task in self.tasks if task.kind == TaskKind.WEB]

    @property
    def ai_tasks(self) -> list[ResearchTask]:
        return [task for task in self.tasks if task.kind == TaskKind.AI]
