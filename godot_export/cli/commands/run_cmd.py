from __future__ import annotations

from pathlib import Path

import typer

from godot_export.cli.commands._helpers import exit_with_code
from godot_export.cli.context import build_context
from godot_export.core.result import Err
from godot_export.output.console import ConsoleProtocol, Style
from godot_export.output.errors import print_run_error, run_error_exit_code
from godot_export.services.orchestrator import Orchestrator, RunSummary


def run(
    create_release: bool | None = typer.Option(
        None,
        "--create-release/--no-create-release",
        help="Publish a GitHub release instead of moving exports into the project.",
    ),
    base_version: str | None = typer.Option(
        None, "--base-version", help="Lowest version the next release may have."
    ),
    project: str | None = typer.Option(
        None, "--project", help="Godot project directory, relative to the workspace."
    ),
    archive: bool | None = typer.Option(
        None, "--archive/--no-archive", help="Zip each preset's output."
    ),
    debug: bool | None = typer.Option(
        None, "--debug/--release", help="Export debug builds instead of release builds."
    ),
    config: Path | None = typer.Option(
        None, "--config", help="TOML file with a [godot-export] table."
    ),
) -> None:
    """Export every preset, then publish a release or move the exports."""
    ctx = build_context(
        overrides={
            "create_release": create_release,
            "base_version": base_version,
            "relative_project_path": project,
            "archive_output": archive,
            "export_debug": debug,
        },
        config_path=config,
    )

    orchestrator = Orchestrator(config=ctx.config, console=ctx.console, http=ctx.http)
    result = orchestrator.run()
    if isinstance(result, Err):
        print_run_error(result.error, ctx.console)
        exit_with_code(run_error_exit_code(result.error))

    _print_summary(ctx.console, result.value)


def _print_summary(console: ConsoleProtocol, summary: RunSummary) -> None:
    if summary.release is not None:
        console.success(f"Released {summary.release.tag_name}")
        if summary.release.html_url:
            console.print(summary.release.html_url, Style.DIM)
        return
    if summary.relocated:
        console.success(f"Moved {len(summary.relocated)} export(s)")
        for path in summary.relocated:
            console.print(f"  {path}", Style.DIM)
        return
    console.success("Done")
