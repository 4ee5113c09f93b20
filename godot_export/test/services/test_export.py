"""Tests for services/export.py - per-preset Godot export."""

from __future__ import annotations

import zipfile
from pathlib import Path

from godot_export.core.config import ActionConfig
from godot_export.core.result import Err, Ok, Result
from godot_export.godot.presets import ExportPreset
from godot_export.output.console import MockConsole
from godot_export.platform.process import ProcessError
from godot_export.services.export import ExportPipeline

EXE = Path("/opt/godot/godot.x86_64")


class FakeGodot:
    """Stands in for the Godot binary: records commands and writes export outputs."""

    def __init__(self, *, fail_on: str | None = None, write_output: bool = True) -> None:
        self.commands: list[list[str]] = []
        self.fail_on = fail_on
        self.write_output = write_output

    def __call__(self, cmd: list[str], cwd: Path) -> Result[None, ProcessError]:
        self.commands.append(cmd)
        if self.fail_on is not None and self.fail_on in cmd:
            return Err(ProcessError(tuple(cmd), 1))
        if self.write_output and ("--export-release" in cmd or "--export-debug" in cmd):
            output = Path(cmd[-1])
            if output.suffix == ".zip":
                with zipfile.ZipFile(output, "w") as zf:
                    zf.writestr("Game.app/Contents/MacOS/Game", b"bin")
            else:
                output.write_bytes(b"exported")
                output.with_suffix(".pck").write_bytes(b"pck")
        return Ok(None)


def _config(tmp_path: Path, **kwargs: object) -> ActionConfig:
    project = tmp_path / "ws"
    project.mkdir(exist_ok=True)
    values: dict[str, object] = {"workspace_root": project, "working_path": tmp_path / "work"}
    values.update(kwargs)
    return ActionConfig(**values)  # type: ignore[arg-type]


LINUX = ExportPreset(0, "Linux/X11", "Linux/X11", "build/linux/game.x86_64")
WINDOWS = ExportPreset(1, "Windows Desktop", "Windows Desktop", "build/win/game.exe")
MACOS = ExportPreset(2, "macOS", "macOS", "build/mac/game.zip")


def test_imports_once_then_exports_each_preset(tmp_path: Path) -> None:
    config = _config(tmp_path)
    godot = FakeGodot()
    pipeline = ExportPipeline(config=config, console=MockConsole(), executable=EXE, runner=godot)

    result = pipeline.run([LINUX, WINDOWS])

    assert isinstance(result, Ok)
    artifacts = result.value
    assert [a.path for a in artifacts] == [
        config.builds_path / "LinuxX11",
        config.builds_path / "Windows Desktop",
    ]
    assert (config.builds_path / "Windows Desktop" / "game.exe").exists()

    project = str(config.project_path.resolve())
    assert godot.commands[0] == [str(EXE), "--headless", "--path", project, "--editor", "--quit"]
    assert godot.commands[1][:6] == [
        str(EXE),
        "--headless",
        "--path",
        project,
        "--export-release",
        "Linux/X11",
    ]
    assert godot.commands[1][6] == str((config.builds_path / "LinuxX11" / "game.x86_64").resolve())
    assert len(godot.commands) == 3


def test_debug_flag(tmp_path: Path) -> None:
    godot = FakeGodot()
    pipeline = ExportPipeline(
        config=_config(tmp_path, export_debug=True),
        console=MockConsole(),
        executable=EXE,
        runner=godot,
    )

    pipeline.run([LINUX]).unwrap()

    assert "--export-debug" in godot.commands[1]
    assert "--export-release" not in godot.commands[1]


def test_no_presets_skips_godot(tmp_path: Path) -> None:
    godot = FakeGodot()
    pipeline = ExportPipeline(config=_config(tmp_path), console=MockConsole(), executable=EXE, runner=godot)

    assert pipeline.run([]) == Ok([])
    assert godot.commands == []


def test_preset_without_export_path_uses_its_name(tmp_path: Path) -> None:
    config = _config(tmp_path)
    pipeline = ExportPipeline(config=config, console=MockConsole(), executable=EXE)
    preset = ExportPreset(0, "Web", "Web")

    assert pipeline.output_file(preset) == config.builds_path / "Web" / "Web"


def test_archive_output_zips_build_dir(tmp_path: Path) -> None:
    config = _config(tmp_path, archive_output=True)
    pipeline = ExportPipeline(config=config, console=MockConsole(), executable=EXE, runner=FakeGodot())

    artifact = pipeline.run([WINDOWS]).unwrap()[0]

    assert artifact.path == config.archives_path / "Windows Desktop.zip"
    assert artifact.path.is_file()
    with zipfile.ZipFile(artifact.path) as zf:
        assert sorted(zf.namelist()) == ["game.exe", "game.pck"]


def test_archive_output_keeps_existing_zip(tmp_path: Path) -> None:
    config = _config(tmp_path, archive_output=True)
    pipeline = ExportPipeline(config=config, console=MockConsole(), executable=EXE, runner=FakeGodot())

    artifact = pipeline.run([MACOS]).unwrap()[0]

    with zipfile.ZipFile(artifact.path) as zf:
        assert zf.namelist() == ["Game.app/Contents/MacOS/Game"]


def test_failed_export_aborts_batch(tmp_path: Path) -> None:
    godot = FakeGodot(fail_on="Linux/X11")
    pipeline = ExportPipeline(config=_config(tmp_path), console=MockConsole(), executable=EXE, runner=godot)

    result = pipeline.run([LINUX, WINDOWS])

    assert isinstance(result, Err)
    assert result.error.kind == "export_failed"
    assert "Linux/X11" in result.error.message
    assert len(godot.commands) == 2


def test_failed_import(tmp_path: Path) -> None:
    godot = FakeGodot(fail_on="--editor")
    pipeline = ExportPipeline(config=_config(tmp_path), console=MockConsole(), executable=EXE, runner=godot)

    result = pipeline.run([LINUX])

    assert isinstance(result, Err)
    assert "import" in result.error.message


def test_missing_output_is_failure(tmp_path: Path) -> None:
    godot = FakeGodot(write_output=False)
    pipeline = ExportPipeline(config=_config(tmp_path), console=MockConsole(), executable=EXE, runner=godot)

    result = pipeline.run([LINUX])

    assert isinstance(result, Err)
    assert "produced no output" in result.error.message


def test_stale_build_is_cleared(tmp_path: Path) -> None:
    config = _config(tmp_path)
    stale = config.builds_path / "LinuxX11" / "old.bin"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")
    pipeline = ExportPipeline(config=config, console=MockConsole(), executable=EXE, runner=FakeGodot())

    pipeline.run([LINUX]).unwrap()

    assert not stale.exists()
