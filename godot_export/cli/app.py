from __future__ import annotations

import typer

from godot_export import __version__
from godot_export.cli.commands.presets_cmd import presets
from godot_export.cli.commands.run_cmd import run
from godot_export.cli.commands.version_cmd import next_version


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    invoke_without_command=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(run)
app.command("next-version")(next_version)
app.command()(presets)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
