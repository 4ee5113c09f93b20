from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import typer

from godot_export.core.config import ActionConfig, load_config
from godot_export.core.errors import ErrorCode
from godot_export.core.result import Err
from godot_export.output.console import ConsoleProtocol, RichConsole, Style
from godot_export.tools.http import HttpClient, RealHttpClient


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: ActionConfig
    console: ConsoleProtocol
    http: HttpClient


def build_context(
    overrides: Mapping[str, object] | None = None,
    config_path: Path | None = None,
) -> CLIContext:
    env = os.environ
    console = RichConsole(github_actions=env.get("GITHUB_ACTIONS") == "true")

    config_result = load_config(env=env, overrides=overrides, toml_path=config_path)
    if isinstance(config_result, Err):
        error = config_result.error
        where = f"{error.path}: " if error.path is not None else ""
        console.error(f"{where}{error.message}")
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    return CLIContext(
        config=config_result.value,
        console=console,
        http=RealHttpClient(),
    )
