from __future__ import annotations

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from godot_export import __version__
from godot_export.cli.context import CLIContext
from godot_export.core.config import ActionConfig, RepositoryInfo
from godot_export.core.errors import ErrorCode
from godot_export.core.result import Err, Ok, Result
from godot_export.output.console import MockConsole
from godot_export.release.model import PublishedRelease
from godot_export.services.errors import RunError
from godot_export.services.orchestrator import PublishRelease, RelocateArtifacts, RunSummary
from godot_export.tools.http import MockHttpClient


def _ctx(tmp_path: Path, console: MockConsole) -> CLIContext:
    return CLIContext(
        config=ActionConfig(workspace_root=tmp_path, working_path=tmp_path / "work"),
        console=console,
        http=MockHttpClient(),
    )


def _patch_run(
    monkeypatch: pytest.MonkeyPatch,
    ctx: CLIContext,
    result: Result[RunSummary, RunError],
    seen: dict[str, object] | None = None,
) -> None:
    import godot_export.cli.commands.run_cmd as run_cmd

    def fake_build_context(
        overrides: dict[str, object] | None = None, config_path: Path | None = None
    ) -> CLIContext:
        if seen is not None:
            seen.update(overrides or {})
            seen["config_path"] = config_path
        return ctx

    class FakeOrchestrator:
        def __init__(self, **_: object) -> None:
            pass

        def run(self) -> Result[RunSummary, RunError]:
            return result

    monkeypatch.setattr(run_cmd, "build_context", fake_build_context)
    monkeypatch.setattr(run_cmd, "Orchestrator", FakeOrchestrator)


def _invoke_run(**kwargs: object) -> None:
    import godot_export.cli.commands.run_cmd as run_cmd

    args: dict[str, object] = {
        "create_release": None,
        "base_version": None,
        "project": None,
        "archive": None,
        "debug": None,
        "config": None,
    }
    args.update(kwargs)
    run_cmd.run(**args)  # type: ignore[arg-type]


def test_run_reports_release(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    console = MockConsole()
    summary = RunSummary(
        mode=PublishRelease(RepositoryInfo("o", "r")),
        release=PublishedRelease(
            release_id=1, tag_name="v1.0.0", html_url="https://github.com/o/r/releases/tag/v1.0.0"
        ),
    )
    _patch_run(monkeypatch, _ctx(tmp_path, console), Ok(summary))

    _invoke_run()

    assert "OK Released v1.0.0" in console.messages
    assert "https://github.com/o/r/releases/tag/v1.0.0" in console.messages


def test_run_reports_moved_exports(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    console = MockConsole()
    summary = RunSummary(
        mode=RelocateArtifacts(tmp_path / "exports"),
        relocated=(tmp_path / "exports" / "Linux",),
    )
    _patch_run(monkeypatch, _ctx(tmp_path, console), Ok(summary))

    _invoke_run()

    assert "OK Moved 1 export(s)" in console.messages


def test_run_passes_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}
    summary = RunSummary(mode=RelocateArtifacts(tmp_path))
    _patch_run(monkeypatch, _ctx(tmp_path, MockConsole()), Ok(summary), seen)

    _invoke_run(create_release=True, base_version="2.0.0", project="game", config=tmp_path / "c.toml")

    assert seen["create_release"] is True
    assert seen["base_version"] == "2.0.0"
    assert seen["relative_project_path"] == "game"
    assert seen["archive_output"] is None
    assert seen["config_path"] == tmp_path / "c.toml"


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("missing_token", ErrorCode.CONFIG_ERROR),
        ("export_failed", ErrorCode.BUILD_ERROR),
        ("publish_failed", ErrorCode.RELEASE_ERROR),
    ],
)
def test_run_failure_exit_codes(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, kind: str, code: ErrorCode
) -> None:
    console = MockConsole()
    error = RunError(kind=kind, message="it broke", hint="try again")  # type: ignore[arg-type]
    _patch_run(monkeypatch, _ctx(tmp_path, console), Err(error))

    with pytest.raises(typer.Exit) as exc:
        _invoke_run()

    assert exc.value.exit_code == int(code)
    assert console.messages == ["error: it broke", "hint: try again"]


def test_next_version(capsys: pytest.CaptureFixture[str]) -> None:
    from godot_export.cli.commands.version_cmd import next_version

    next_version(base_version="1.0.0", latest_tag="v1.2.3")

    out = capsys.readouterr().out
    assert "v1.2.4" in out
    assert "auto_increment" in out


def test_next_version_invalid_base() -> None:
    from godot_export.cli.commands.version_cmd import next_version

    with pytest.raises(typer.Exit) as exc:
        next_version(base_version="latest", latest_tag=None)

    assert exc.value.exit_code == int(ErrorCode.CONFIG_ERROR)


def test_presets_lists_project_presets(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import godot_export.cli.commands.presets_cmd as presets_cmd

    (tmp_path / "export_presets.cfg").write_text(
        '[preset.0]\nname="Web"\nplatform="Web"\nexport_path="build/index.html"\n',
        encoding="utf-8",
    )
    console = MockConsole()
    monkeypatch.setattr(presets_cmd, "build_context", lambda **_: _ctx(tmp_path, console))

    presets_cmd.presets(project=None, config=None)

    assert "0: Web (Web) -> build/index.html" in console.messages


def test_presets_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import godot_export.cli.commands.presets_cmd as presets_cmd

    console = MockConsole()
    monkeypatch.setattr(presets_cmd, "build_context", lambda **_: _ctx(tmp_path, console))

    with pytest.raises(typer.Exit) as exc:
        presets_cmd.presets(project=None, config=None)

    assert exc.value.exit_code == int(ErrorCode.CONFIG_ERROR)
    assert console.has_error()


def test_build_context_exits_on_bad_config(monkeypatch: pytest.MonkeyPatch) -> None:
    from godot_export.cli.context import build_context

    monkeypatch.setenv("INPUT_CREATE_RELEASE", "perhaps")

    with pytest.raises(typer.Exit) as exc:
        build_context()

    assert exc.value.exit_code == int(ErrorCode.CONFIG_ERROR)


def test_version_flag() -> None:
    from godot_export.cli.app import app

    result = CliRunner().invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__
