from __future__ import annotations

from pathlib import Path

import typer

from godot_export.cli.commands._helpers import exit_on_error, exit_with_code
from godot_export.cli.context import build_context
from godot_export.core.errors import ErrorCode
from godot_export.core.result import Err
from godot_export.godot.presets import has_export_presets, load_export_presets
from godot_export.output.console import Style


def presets(
    project: str | None = typer.Option(
        None, "--project", help="Godot project directory, relative to the workspace."
    ),
    config: Path | None = typer.Option(
        None, "--config", help="TOML file with a [godot-export] table."
    ),
) -> None:
    """List the export presets of the project."""
    ctx = build_context(overrides={"relative_project_path": project}, config_path=config)
    project_path = ctx.config.project_path
    presets_file = ctx.config.export_presets_path

    if not has_export_presets(presets_file):
        ctx.console.error(f"No {presets_file.name} found in {project_path}")
        exit_with_code(int(ErrorCode.CONFIG_ERROR))

    result = load_export_presets(presets_file)
    exit_on_error(result, ctx.console, ErrorCode.CONFIG_ERROR)
    if isinstance(result, Err):
        return

    if not result.value:
        ctx.console.warning("No presets defined")
        return

    ctx.console.header(str(project_path))
    for preset in result.value:
        target = preset.export_path or "-"
        ctx.console.print(f"{preset.index}: {preset.name} ({preset.platform}) -> {target}")
    ctx.console.print(f"{len(result.value)} preset(s)", Style.DIM)
