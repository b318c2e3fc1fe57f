from __future__ import annotations

from typing import Any

from deep_research.models.events import EventType, ProgressEvent
from deep_research.models.research import Reference
from deep_research.models.research_plan import ResearchPlan, ResearchTask


def plan_created(plan: ResearchPlan) -> ProgressEvent:
    """Emit plan created event with the full structured plan."""
    return ProgressEvent(
        event=EventType.PLAN_CREATED,
        data={
            "title": plan.title,
            "language": plan.language,
            "objectives": plan.objectives,
            "expected_outcomes": plan.expected_outcomes,
            "tasks": [
                {
                    "title": task.title,
                    "objectives": task.objectives,
                    "kind": task.kind.value,
                    "query": task.query,
                }
                for task in plan.tasks
            ],
        },
    )


def task_started(index: int, task: ResearchTask) -> ProgressEvent:
    return ProgressEvent(
        event=EventType.TASK_STARTED,
        data={"index": index, "title": task.title, "kind": task.kind.value},
    )


def task_progress(index: int, status: str, **kwargs: Any) -> ProgressEvent:
    return ProgressEvent(
        event=EventType.TASK_PROGRESS, data={"index": index, "status": status, **kwargs}
    )


def task_completed(index: int, task: ResearchTask, references_count: int) -> ProgressEvent:
    return ProgressEvent(
        event=EventType.TASK_COMPLETED,
        data={"index": index, "title": task.title, "references_count": references_count},
    )


def task_failed(index: int, task: ResearchTask, message: str) -> ProgressEvent:
    return ProgressEvent(
        event=EventType.TASK_FAILED,
        data={"index": index, "title": task.title, "message": message},
    )


def synthesis_started(results_count: int) -> ProgressEvent:
    return ProgressEvent(event=EventType.SYNTHESIS_STARTED, data={"results_count": results_count})


def research_complete(
    report: str,
    references: list[Reference],
    runtime_ms: int | None = None,
) -> ProgressEvent:
    return ProgressEvent(
        event=EventType.RESEARCH_COMPLETE,
        data={
            "report": report,
            "sources": [{"url": ref.url, "title": ref.title} for ref in references],
            "runtime_ms": runtime_ms,
        },
    )
