"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from godot_export.core.errors import ErrorCode
from godot_export.core.result import Err, Result
from godot_export.output.console import Style

if TYPE_CHECKING:
    from godot_export.output.console import ConsoleProtocol

T = TypeVar("T")
E = TypeVar("E")


def exit_on_error(
    result: Result[T, E],
    console: ConsoleProtocol,
    error_code: ErrorCode = ErrorCode.CONFIG_ERROR,
) -> None:
    """Print ``message``/``hint`` of an Err result and exit; no-op on Ok."""
    if isinstance(result, Err):
        error = result.error
        message: str = getattr(error, "message", str(error))
        hint: str | None = getattr(error, "hint", None)
        console.error(message)
        if hint:
            console.print(f"hint: {hint}", Style.DIM)
        raise typer.Exit(code=int(error_code))


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)
