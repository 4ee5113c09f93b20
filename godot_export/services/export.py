"""Run Godot exports, one preset at a time.

Each preset is exported into ``<working_path>/builds/<preset name>/``. Godot
keeps a shared import cache inside the project (``.godot/``), so exports
are never run concurrently. The project is imported once up front because
a fresh checkout has no import cache and headless exports would otherwise
ship without resources.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from godot_export.core.config import ActionConfig
from godot_export.core.result import Err, Ok, Result
from godot_export.godot.artifacts import ExportArtifact, sanitize_name, zip_directory
from godot_export.godot.presets import ExportPreset
from godot_export.output.console import ConsoleProtocol, Style
from godot_export.platform.process import ProcessError, run

from .errors import RunError

__all__ = ["ExportPipeline", "Runner"]

Runner = Callable[[list[str], Path], Result[None, ProcessError]]

_EXPORT_TIMEOUT_SECONDS = 30 * 60.0


def _default_runner(cmd: list[str], cwd: Path) -> Result[None, ProcessError]:
    return run(cmd, cwd, capture=False, timeout=_EXPORT_TIMEOUT_SECONDS).map(lambda _: None)


class ExportPipeline:
    """Exports every preset and returns one artifact per preset."""

    def __init__(
        self,
        *,
        config: ActionConfig,
        console: ConsoleProtocol,
        executable: Path,
        runner: Runner | None = None,
    ) -> None:
        self._config = config
        self._console = console
        self._executable = executable
        self._runner = runner or _default_runner

    @property
    def _project(self) -> Path:
        return self._config.project_path.resolve()

    def _run(self, cmd: list[str]) -> Result[None, ProcessError]:
        self._console.print(" ".join(cmd), Style.DIM)
        return self._runner(cmd, self._project)

    def import_project(self) -> Result[None, RunError]:
        cmd = [
            str(self._executable),
            "--headless",
            "--path",
            str(self._project),
            "--editor",
            "--quit",
        ]
        result = self._run(cmd)
        if isinstance(result, Err):
            return Err(
                RunError(kind="export_failed", message=f"Project import failed: {result.error}")
            )
        return Ok(None)

    def output_file(self, preset: ExportPreset) -> Path:
        """Where Godot writes ``preset``: the build dir plus the preset's file name."""
        build_dir = self._config.builds_path / sanitize_name(preset.name)
        filename = Path(preset.export_path).name if preset.export_path else ""
        return build_dir / (filename or sanitize_name(preset.name))

    def export_preset(self, preset: ExportPreset) -> Result[ExportArtifact, RunError]:
        output = self.output_file(preset)
        build_dir = output.parent
        try:
            if build_dir.exists():
                shutil.rmtree(build_dir)
            build_dir.mkdir(parents=True)
        except OSError as e:
            return Err(RunError(kind="io_error", message=f"Cannot prepare {build_dir}: {e}"))

        flag = "--export-debug" if self._config.export_debug else "--export-release"
        cmd = [
            str(self._executable),
            "--headless",
            "--path",
            str(self._project),
            flag,
            preset.name,
            str(output.resolve()),
        ]
        result = self._run(cmd)
        if isinstance(result, Err):
            return Err(
                RunError(
                    kind="export_failed",
                    message=f'Export of preset "{preset.name}" failed: {result.error}',
                    hint="Check that export templates match the Godot executable version",
                )
            )
        if not output.exists():
            return Err(
                RunError(
                    kind="export_failed",
                    message=f'Export of preset "{preset.name}" produced no output at {output}',
                )
            )

        if not self._config.archive_output:
            return Ok(ExportArtifact(preset=preset, path=build_dir))
        return self._archive(preset, output)

    def _archive(self, preset: ExportPreset, output: Path) -> Result[ExportArtifact, RunError]:
        archive = self._config.archives_path / f"{sanitize_name(preset.name)}.zip"
        try:
            archive.parent.mkdir(parents=True, exist_ok=True)
            # macOS exports are already a zip; re-zipping would nest it
            if output.suffix.lower() == ".zip":
                shutil.copy2(output, archive)
            else:
                zip_directory(output.parent, archive)
        except OSError as e:
            return Err(RunError(kind="io_error", message=f"Cannot archive {preset.name}: {e}"))
        self._console.print(f"Archived {preset.name}: {archive}", Style.DIM)
        return Ok(ExportArtifact(preset=preset, path=archive))

    def run(self, presets: Sequence[ExportPreset]) -> Result[list[ExportArtifact], RunError]:
        """Export all presets; the first failure aborts the batch."""
        if not presets:
            return Ok([])

        imported = self.import_project()
        if isinstance(imported, Err):
            return imported

        artifacts: list[ExportArtifact] = []
        for preset in presets:
            self._console.print(f"Exporting {preset.name} ({preset.platform})")
            result = self.export_preset(preset)
            if isinstance(result, Err):
                return result
            artifacts.append(result.value)
            self._console.success(f"{preset.name}: {result.value.path}")
        return Ok(artifacts)
