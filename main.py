"""Deep Research - CLI for turning one query into a cited research report."""

import argparse
import asyncio
import sys
import time
from pathlib import Path

from loguru import logger

from deep_research.agents.orchestrator import ResearchOrchestrator
from deep_research.config import settings
from deep_research.errors import DeepResearchError
from deep_research.models.events import ProgressEvent
from deep_research.services.logger import setup_logging


def print_event(event: ProgressEvent) -> None:
    event_type = event.event.value
    data = event.data

    if event_type == "plan_created":
        tasks = data.get("tasks", [])
        print("===")
        print(f"Title: {data.get('title', '')}")
        print(f"Expected Outcomes: {data.get('expected_outcomes', '')}")
        print("===")
        print(f"Research Plan ({len(tasks)} tasks):")
        for i, task in enumerate(tasks, 1):
            print(f"  {i}. [{task.get('kind')}] {task.get('title', '')}")
            print(f"     Objective: {task.get('objectives', '')}")
        print("===")

    elif event_type == "task_completed":
        print(f"  [+] {data.get('index', 0) + 1}. {data.get('title')} ({data.get('references_count')} sources)")

    elif event_type == "task_failed":
        print(f"  [!] {data.get('index', 0) + 1}. {data.get('title')}: {data.get('message')}")

    elif event_type == "synthesis_started":
        print("\nGenerating final report...")


async def run_research(query: str) -> str:
    """Run research on the given query, printing progress as it goes."""
    orchestrator = ResearchOrchestrator()
    report = ""
    async for event in orchestrator.research(query):
        logger.debug(event.format().strip())
        print_event(event)
        if event.event.value == "research_complete":
            report = event.data.get("report", "")
    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="deep-research",
        description="CLI tool for conducting deep research",
    )
    parser.add_argument("query", help="Research query")
    parser.add_argument("--output", "-o", default=settings.report_path, help="Report file path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr")

    args = parser.parse_args(argv)
    if not args.query.strip():
        parser.error("query must not be empty")

    setup_logging(level="DEBUG" if args.verbose else None)

    print(f"Research query: {args.query}")
    start_time = time.perf_counter()
    try:
        report = asyncio.run(run_research(args.query))
    except DeepResearchError as exc:
        logger.error(f"Research failed: {exc}")
        print(f"\n[!] Research failed: {exc}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - start_time

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report, encoding="utf-8")
    print(f"\nResearch completed in {elapsed:.2f} seconds")
    print(f"Report has been saved to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
