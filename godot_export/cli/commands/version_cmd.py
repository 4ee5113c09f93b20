from __future__ import annotations

import os

import typer

from godot_export.cli.commands._helpers import exit_on_error
from godot_export.core.config import DEFAULT_BASE_VERSION
from godot_export.core.errors import ErrorCode
from godot_export.core.result import Err
from godot_export.output.console import RichConsole, Style
from godot_export.release.resolver import resolve_version


def next_version(
    base_version: str = typer.Option(
        DEFAULT_BASE_VERSION, "--base-version", help="Lowest version the release may have."
    ),
    latest_tag: str | None = typer.Option(
        None, "--latest-tag", help="Tag of the latest published release, if any."
    ),
) -> None:
    """Print the version the next release would get. No network access."""
    console = RichConsole(github_actions=os.environ.get("GITHUB_ACTIONS") == "true")

    result = resolve_version(base_version, latest_tag)
    exit_on_error(result, console, ErrorCode.CONFIG_ERROR)
    if isinstance(result, Err):
        return

    decision = result.value
    console.print(decision.tag)
    console.print(f"reason: {decision.reason}", Style.DIM)
