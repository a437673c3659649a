"""CLI error output for JSON and human-readable formats."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any, NoReturn

import click

if TYPE_CHECKING:
    from tagprobe.cli.exit_codes import ExitCode


def error_exit(
    message: str,
    code: ExitCode | int,
    json_output: bool = False,
    data: dict[str, Any] | None = None,
) -> NoReturn:
    """Exit with formatted error message.

    Args:
        message: Error message to display.
        code: Exit code to use (ExitCode enum or int).
        json_output: Whether to format output as JSON.
        data: Extra fields for the JSON error object (e.g. the file path).

    Note:
        This function never returns; it always calls sys.exit().
    """
    from tagprobe.cli.exit_codes import ExitCode

    if isinstance(code, ExitCode):
        code_name = code.name
        exit_value = int(code)
    else:
        code_name = "UNKNOWN_ERROR"
        exit_value = code

    if json_output:
        error: dict[str, Any] = {"code": code_name, "message": message}
        if data:
            error.update(data)
        click.echo(json.dumps({"status": "failed", "error": error}), err=True)
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_value)
