"""Run a command's coroutine and turn failures into exit codes."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Coroutine, TypeVar

import typer

from anirec.cli.common.context import get_cli_context
from anirec.cli.common.error_handler import handle_cli_error
from anirec.cli.json_formatter import format_success_output

T = TypeVar("T")


def run_command(command: str, make_coroutine: Callable[[], Coroutine[Any, Any, T]]) -> T:
    """Run the coroutine on a fresh event loop.

    Raises:
        typer.Exit: With the mapped exit code when the coroutine fails
    """
    context = get_cli_context()
    try:
        return asyncio.run(make_coroutine())
    except (Exception, KeyboardInterrupt) as e:  # noqa: BLE001
        exit_code = handle_cli_error(e, command, json_output=context.is_json_output_enabled())
        raise typer.Exit(exit_code) from e


def emit_json(command: str, data: Any, warnings: list[str] | None = None) -> None:
    typer.echo(format_success_output(command, data, warnings).decode("utf-8"))
