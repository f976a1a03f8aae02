"""
Reusable Typer Options Module

Option definitions shared by the root callback and the recommendation
commands, so every command spells its flags the same way. Use them inside
``Annotated``::

    verbose: Annotated[int, verbose_option] = 0
"""

from __future__ import annotations

import typer

from anirec import __version__
from anirec.shared.constants import CLIHelp


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

# Log level option - overrides the configured level when given
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: from configuration.",
)

json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of human-readable format.",
)

config_option = typer.Option(
    "--config",
    "-c",
    help=CLIHelp.CONFIG_HELP,
    dir_okay=False,
)

# Version option - for main app only
version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    is_eager=True,
    callback=version_callback,
)

sort_option = typer.Option(
    "--sort",
    "-s",
    case_sensitive=False,
    help=CLIHelp.SORT_HELP,
)

filter_option = typer.Option(
    "--filter",
    "-f",
    case_sensitive=False,
    help=CLIHelp.FILTER_HELP,
)
