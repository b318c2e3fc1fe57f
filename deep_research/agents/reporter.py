from __future__ import annotations

from loguru import logger

from deep_research.errors import ConfigurationError, SynthesisFailure
from deep_research.llm_client import LLMClient
from deep_research.models.research import TaskResult
from deep_research.models.research_plan import ResearchPlan
from deep_research.services.prompt_store import render_prompt


def format_plan_recap(plan: ResearchPlan) -> str:
    return "\n".join(f"{i}. {task.title}: {task.query}" for i, task in enumerate(plan.tasks, 1))


def format_results(results: list[TaskResult]) -> str:
    blocks: list[str] = []
    for i, result in enumerate(results, 1):
        answer = result.answer.strip() or "(no findings)"
        block = f"{i}. {answer}"
        if result.references:
            refs = "\n".join(f"- [{ref.title or ref.url}]({ref.url})" for ref in result.references)
            block += f"\nReferences:\n{refs}"
        blocks.append(block)
    return "\n".join(blocks)


class ReportSynthesizer:
    """Merges the plan and all task results into one cited narrative.

    Keeping plan sections out of the article is left to the prompt's formatting
    requirements; the model's report is returned as-is.
    """

    name = "reporter"

    def __init__(self, llm: LLMClient, model: str):
        self.llm = llm
        self.model = model

    def build_prompt(self, plan: ResearchPlan, results: list[TaskResult]) -> str:
        return render_prompt(
            "reporter.prompt",
            title=plan.title,
            objectives=plan.objectives,
            expected_outcomes=plan.expected_outcomes,
            plan_recap=format_plan_recap(plan),
            results=format_results(results),
            language=plan.language,
        )

    async def synthesize(self, plan: ResearchPlan, results: list[TaskResult]) -> str:
        try:
            report = await self.llm.generate_text(
                self.build_prompt(plan, results), model=self.model, caller=self.name
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            raise SynthesisFailure(f"Could not generate the final report: {exc}") from exc

        if not report.strip():
            logger.warning(f"Model returned an empty report for '{plan.title}'")
        return report
