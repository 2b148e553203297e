"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from cherry.core.errors import ErrorCode
from cherry.core.result import Err, Result
from cherry.output.errors import error_exit_code, print_error

if TYPE_CHECKING:
    from cherry.cli.context import CLIContext


T = TypeVar("T")
E = TypeVar("E")


def exit_on_error[T, E](
    result: Result[T, E],
    ctx: CLIContext,
    error_code: ErrorCode = ErrorCode.BUILD_ERROR,
) -> T:
    """Return the Ok value, or print the error and exit.

    Replaces the pattern:
        match result:
            case Err(e):
                print_error(e, ctx.console)
                raise typer.Exit(code=error_exit_code(e))
            case Ok(value):
                ...

    ``error_code`` is used for process failures; the other error types keep
    their own codes (see output.errors.error_exit_code).
    """
    if isinstance(result, Err):
        error = result.error
        print_error(error, ctx.console)  # type: ignore[arg-type]
        raise typer.Exit(code=error_exit_code(error, error_code))  # type: ignore[arg-type]
    return result.value
