"""Recommendation commands: quiz and seeds.

Both commands always succeed from the user's point of view: the
recommendation client answers with the fallback list when the model is
unavailable, and the output says so.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console

from anirec.cli.common.context import get_cli_context
from anirec.cli.common.runner import emit_json, run_command
from anirec.cli.rendering import render_report
from anirec.containers import container
from anirec.shared.constants import CLICommands
from anirec.shared.models import QuizAnswers, RecommendationReport, ResultFilter, SortKey


async def _quiz(
    answers: QuizAnswers,
    sort_by: SortKey | None,
    result_filter: ResultFilter,
) -> RecommendationReport:
    pipeline = container.pipeline()
    try:
        return await pipeline.recommend_from_quiz(
            answers,
            sort_by=sort_by,
            result_filter=result_filter,
        )
    finally:
        await pipeline.close()


async def _seeds(
    titles: Sequence[str],
    sort_by: SortKey | None,
    result_filter: ResultFilter,
) -> RecommendationReport:
    pipeline = container.pipeline()
    try:
        return await pipeline.recommend_from_seeds(
            list(titles),
            sort_by=sort_by,
            result_filter=result_filter,
        )
    finally:
        await pipeline.close()


def _output(command: str, report: RecommendationReport) -> None:
    if get_cli_context().is_json_output_enabled():
        warnings = []
        if report.result.is_fallback:
            warnings.append(f"Fallback recommendations used: {report.result.error}")
        emit_json(command, report, warnings)
        return
    render_report(Console(), report)


def quiz_command(
    answers: QuizAnswers,
    sort_by: SortKey | None = SortKey.SCORE,
    result_filter: ResultFilter = ResultFilter.ALL,
) -> None:
    """Recommend from quiz answers and print the resolved report."""
    report = run_command(CLICommands.QUIZ, lambda: _quiz(answers, sort_by, result_filter))
    _output(CLICommands.QUIZ, report)


def seeds_command(
    titles: Sequence[str],
    sort_by: SortKey | None = SortKey.SCORE,
    result_filter: ResultFilter = ResultFilter.ALL,
) -> None:
    """Recommend titles similar to the seeds and print the resolved report."""
    report = run_command(CLICommands.SEEDS, lambda: _seeds(titles, sort_by, result_filter))
    _output(CLICommands.SEEDS, report)
