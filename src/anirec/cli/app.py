"""
AniRec Typer CLI Application

Entry point of the ``anirec`` command. The root callback parses the global
options, loads settings, configures logging and wires the service
container; each command then runs one operation and prints a Rich
rendering or a JSON envelope.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, List, Optional

import typer

from anirec.cli.commands.anime import details_command, search_command, trending_command
from anirec.cli.commands.recommend import quiz_command, seeds_command
from anirec.cli.common.context import CliContext, LogLevel, set_cli_context
from anirec.cli.common.error_handler import handle_cli_error
from anirec.cli.common.options import (
    config_option,
    filter_option,
    json_output_option,
    log_level_option,
    sort_option,
    verbose_option,
    version_option,
)
from anirec.config import reload_config
from anirec.containers import configure_container
from anirec.shared.constants import AniListConfig, CLICommands, CLIHelp, QuizDefaults
from anirec.shared.logging import setup_structured_logger
from anirec.shared.models import QuizAnswers, ResultFilter, SortKey


def main_callback(
    verbose: int,
    log_level: LogLevel | None,
    json_output: bool,
    config_path: Path | None,
) -> CliContext:
    """
    Set up one CLI invocation.

    Loads settings (``--config`` or the default locations), sets the CLI
    context, configures the ``anirec`` logger and installs the settings in
    the service container.

    Raises:
        ApplicationError: If the configuration cannot be loaded
    """
    settings = reload_config(config_path)

    context = CliContext(
        verbose=verbose,
        log_level=log_level or LogLevel(settings.logging.level.upper()),
        json_output=json_output,
        config_path=config_path,
    )
    set_cli_context(context)

    setup_structured_logger(
        level=context.get_effective_log_level(),
        log_file=settings.logging.file,
        use_rich_console=settings.logging.rich_console and not json_output,
    )
    configure_container(settings)
    return context


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[Optional[LogLevel], log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
    config: Annotated[Optional[Path], config_option] = None,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Main CLI callback with error handling."""
    try:
        main_callback(verbose, log_level, json_output, config)
    except Exception as e:  # noqa: BLE001
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


@app.command(CLICommands.TRENDING, help=CLIHelp.TRENDING_HELP)
def trending(
    page: Annotated[int, typer.Option("--page", "-p", min=1, help="Result page.")] = 1,
    limit: Annotated[
        Optional[int],
        typer.Option(
            "--limit",
            "-n",
            min=1,
            max=AniListConfig.MAX_PER_PAGE,
            help="Results per page (default from configuration).",
        ),
    ] = None,
) -> None:
    """
    Examples:
        anirec trending
        anirec --json trending --limit 5
    """
    trending_command(page, limit)


@app.command(CLICommands.SEARCH, help=CLIHelp.SEARCH_HELP)
def search(
    term: Annotated[str, typer.Argument(help="Title or part of a title.")],
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, max=AniListConfig.MAX_PER_PAGE, help="Maximum results."),
    ] = None,
) -> None:
    search_command(term, limit)


@app.command(CLICommands.DETAILS, help=CLIHelp.DETAILS_HELP)
def details(
    media_id: Annotated[int, typer.Argument(min=1, help="AniList media id.")],
) -> None:
    details_command(media_id)


@app.command(CLICommands.QUIZ, help=CLIHelp.QUIZ_HELP)
def quiz(
    vibe: Annotated[Optional[str], typer.Option(help=f"Genre or mood (default: {QuizDefaults.VIBE}).")] = None,
    pace: Annotated[Optional[str], typer.Option(help=f"Story pace (default: {QuizDefaults.PACE}).")] = None,
    era: Annotated[Optional[str], typer.Option(help=f"Release era (default: {QuizDefaults.ERA}).")] = None,
    violence: Annotated[
        Optional[str],
        typer.Option(help=f"Violence level (default: {QuizDefaults.VIOLENCE})."),
    ] = None,
    focus: Annotated[Optional[str], typer.Option(help=f"Story focus (default: {QuizDefaults.FOCUS}).")] = None,
    sort_by: Annotated[SortKey, sort_option] = SortKey.SCORE,
    result_filter: Annotated[ResultFilter, filter_option] = ResultFilter.ALL,
) -> None:
    """
    Examples:
        anirec quiz --vibe Action --pace Fast --era Modern
        anirec quiz --focus Characters --sort score --filter recent
    """
    answers = QuizAnswers.model_validate(
        {"vibe": vibe, "pace": pace, "era": era, "violence": violence, "focus": focus},
    )
    quiz_command(answers, sort_by, result_filter)


@app.command(CLICommands.SEEDS, help=CLIHelp.SEEDS_HELP)
def seeds(
    titles: Annotated[List[str], typer.Argument(help="One or more anime titles.")],
    sort_by: Annotated[SortKey, sort_option] = SortKey.SCORE,
    result_filter: Annotated[ResultFilter, filter_option] = ResultFilter.ALL,
) -> None:
    """
    Examples:
        anirec seeds "Cowboy Bebop" "Trigun"
        anirec --json seeds Frieren --sort confidence
    """
    seeds_command(titles, sort_by, result_filter)


if __name__ == "__main__":
    app()
