from __future__ import annotations

import asyncio
import time
from typing import Any, AsyncGenerator, Callable

from loguru import logger

from deep_research.agents.ai_researcher import ModelOnlyResearchRunner
from deep_research.agents.planner import PlanGenerator
from deep_research.agents.reporter import ReportSynthesizer
from deep_research.agents.summarizer import HierarchicalSummarizer
from deep_research.agents.url_selector import URLSelector
from deep_research.agents.web_researcher import WebResearchRunner
from deep_research.config import ModelTiers, Settings, settings
from deep_research.errors import ConfigurationError, TaskExecutionFailure
from deep_research.llm_client import LLMClient
from deep_research.models.events import EventType, ProgressEvent
from deep_research.models.research import Reference, TaskOutcome, TaskResult
from deep_research.models.research_plan import ResearchPlan, ResearchTask, TaskKind
from deep_research.services import logger as log_service
from deep_research.services import streaming
from deep_research.tools.content_fetcher import ContentFetcher, build_content_fetcher
from deep_research.tools.search_provider import SearchProvider, SearxSearchProvider

FAILURE_POLICIES = ("abort", "continue")


class ResearchOrchestrator:
    """Orchestrates the full research pipeline.

    Flow:
      1. Generate a research plan (ordered web/ai tasks) with the flagship model
      2. Fan out: run every task concurrently on the matching runner
      3. Collect one result per task, in plan order
      4. Synthesize the final report with the flagship model

    `research()` yields progress events; the last one carries the report.
    """

    def __init__(
        self,
        llm: LLMClient | None = None,
        *,
        models: ModelTiers | None = None,
        search_provider: SearchProvider | None = None,
        fetcher: ContentFetcher | None = None,
        config: Settings | None = None,
    ):
        cfg = config or settings
        self.llm = llm or LLMClient()
        self.models = models or cfg.model_tiers
        self.max_parallel_tasks = max(int(cfg.max_parallel_tasks), 0)
        self.task_failure_policy = str(cfg.task_failure_policy).lower().strip()
        if self.task_failure_policy not in FAILURE_POLICIES:
            raise ConfigurationError(f"Unsupported TASK_FAILURE_POLICY: {cfg.task_failure_policy}")

        self.planner = PlanGenerator(self.llm, self.models.flagship)
        self.web_runner = WebResearchRunner(
            self.llm,
            self.models.fast,
            search_provider or SearxSearchProvider(cfg.search_base_url, cfg.search_timeout_seconds),
            fetcher or build_content_fetcher(cfg),
            URLSelector(self.llm, self.models.flagship),
            HierarchicalSummarizer(
                self.llm,
                self.models.fast,
                chunk_size=cfg.summary_chunk_size,
                max_parallel=cfg.max_parallel_summaries,
            ),
            max_pages=cfg.search_max_pages,
            max_parallel_fetches=cfg.max_parallel_fetches,
            deduplicate_urls=cfg.deduplicate_urls,
        )
        self.ai_runner = ModelOnlyResearchRunner(self.llm, self.models.fast)
        self.reporter = ReportSynthesizer(self.llm, self.models.flagship)

    def _runner_for(self, task: ResearchTask) -> WebResearchRunner | ModelOnlyResearchRunner:
        if task.kind == TaskKind.WEB:
            return self.web_runner
        return self.ai_runner

    async def _execute(
        self,
        index: int,
        task: ResearchTask,
        emit: Callable[[ProgressEvent], None],
        semaphore: asyncio.Semaphore | None,
    ) -> TaskOutcome:
        """Run one task and capture its result or error; never raises."""

        def progress(status: str, **data: Any) -> None:
            emit(streaming.task_progress(index, status, **data))

        async def run() -> TaskResult:
            emit(streaming.task_started(index, task))
            return await self._runner_for(task).run(task, progress)

        try:
            if semaphore is None:
                result = await run()
            else:
                async with semaphore:
                    result = await run()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception(f"Task {index + 1} ({task.title}) failed")
            emit(streaming.task_failed(index, task, str(exc)))
            return TaskOutcome(index=index, error=exc)

        emit(streaming.task_completed(index, task, len(result.references)))
        return TaskOutcome(index=index, result=result)

    async def _run_tasks(
        self, plan: ResearchPlan
    ) -> AsyncGenerator[ProgressEvent | TaskOutcome, None]:
        """Fan out over all tasks, streaming their events, then yield outcomes in plan order."""
        queue: asyncio.Queue[ProgressEvent | int] = asyncio.Queue()
        semaphore = asyncio.Semaphore(self.max_parallel_tasks) if self.max_parallel_tasks else None

        jobs: list[asyncio.Task[TaskOutcome]] = []
        for index, task in enumerate(plan.tasks):
            job = asyncio.create_task(self._execute(index, task, queue.put_nowait, semaphore))
            job.add_done_callback(lambda _, i=index: queue.put_nowait(i))
            jobs.append(job)

        remaining = len(jobs)
        try:
            while remaining:
                item = await queue.get()
                if isinstance(item, ProgressEvent):
                    yield item
                    continue

                remaining -= 1
                outcome = jobs[item].result()
                if not outcome.ok and self.task_failure_policy == "abort":
                    failed = plan.tasks[outcome.index]
                    raise TaskExecutionFailure(
                        outcome.index, failed.title, str(outcome.error)
                    ) from outcome.error
        finally:
            for job in jobs:
                if not job.done():
                    job.cancel()

        for job in jobs:
            yield job.result()

    async def research(self, query: str) -> AsyncGenerator[ProgressEvent, None]:
        """Execute the full research pipeline, yielding progress events throughout."""
        started_at = time.monotonic()
        log_service.log_research_step("plan", "started", {"query": query})
        plan = await self.planner.generate(query)
        log_service.log_research_step("plan", "completed", {"title": plan.title, "tasks": len(plan.tasks)})
        yield streaming.plan_created(plan)

        outcomes: list[TaskOutcome] = []
        async for item in self._run_tasks(plan):
            if isinstance(item, TaskOutcome):
                outcomes.append(item)
            else:
                yield item

        results = [self._result_from(outcome, plan) for outcome in outcomes]
        log_service.log_research_step(
            "tasks",
            "completed",
            {"results": len(results), "failed": sum(1 for r in results if r.failed)},
        )

        yield streaming.synthesis_started(len(results))
        report = await self.reporter.synthesize(plan, results)
        runtime_ms = int((time.monotonic() - started_at) * 1000)
        log_service.log_research_step("synthesis", "completed", {"runtime_ms": runtime_ms})

        references: list[Reference] = [ref for result in results for ref in result.references]
        yield streaming.research_complete(report=report, references=references, runtime_ms=runtime_ms)

    @staticmethod
    def _result_from(outcome: TaskOutcome, plan: ResearchPlan) -> TaskResult:
        if outcome.result is not None:
            return outcome.result
        title = plan.tasks[outcome.index].title
        return TaskResult(
            answer=f"No findings are available for '{title}': the task failed ({outcome.error}).",
            references=(),
            failed=True,
        )

    async def run(self, query: str) -> str:
        """Run the pipeline to completion and return the report."""
        report = ""
        async for event in self.research(query):
            if event.event == EventType.RESEARCH_COMPLETE:
                report = event.data["report"]
        return report
