"""End-to-end export/release run.

Stages run strictly in order and the first failure ends the run:

1. validate configuration (token, repository, ``export_presets.cfg``)
2. resolve the release version (release mode only)
3. create the working path
4. set up the Godot executable and export templates
5. export every preset
6. publish a release, or move the exports into ``<project>/exports``

Nothing is retried or rolled back: artifacts exported before a failed
publish stay on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from godot_export.core.config import EXPORT_PRESETS_FILE, ActionConfig, RepositoryInfo
from godot_export.core.result import Err, Ok, Result
from godot_export.github.client import GitHubClient
from godot_export.godot.artifacts import ExportArtifact, sanitize_name
from godot_export.godot.presets import ExportPreset, has_export_presets, load_export_presets
from godot_export.output.console import ConsoleProtocol
from godot_export.release.history import latest_release_tag
from godot_export.release.model import PublishedRelease, ReleaseDecision
from godot_export.release.publisher import ReleasePublisher
from godot_export.release.resolver import resolve_version
from godot_export.tools.http import HttpClient

from .errors import RunError
from .export import ExportPipeline, Runner
from .relocate import relocate_artifacts
from .setup import DependencySetup, GodotToolchain, ToolchainSetup

__all__ = [
    "Orchestrator",
    "PublishRelease",
    "RelocateArtifacts",
    "ReleaseMode",
    "RunSummary",
    "select_mode",
]


@dataclass(frozen=True, slots=True)
class PublishRelease:
    repository: RepositoryInfo | None


@dataclass(frozen=True, slots=True)
class RelocateArtifacts:
    destination: Path


ReleaseMode = PublishRelease | RelocateArtifacts


def select_mode(config: ActionConfig) -> ReleaseMode:
    """Pick the final stage once, from ``create_release``."""
    if config.create_release:
        return PublishRelease(repository=config.repository)
    return RelocateArtifacts(destination=config.exports_path)


@dataclass(frozen=True, slots=True)
class RunSummary:
    mode: ReleaseMode
    decision: ReleaseDecision | None = None
    artifacts: tuple[ExportArtifact, ...] = ()
    release: PublishedRelease | None = None
    relocated: tuple[Path, ...] = ()


class Orchestrator:
    """Runs the pipeline for one ``ActionConfig``.

    ``http`` serves both GitHub API calls and downloads. ``runner`` replaces
    the Godot subprocess call, and ``setup`` replaces the whole dependency
    stage; both exist for tests.
    """

    def __init__(
        self,
        *,
        config: ActionConfig,
        console: ConsoleProtocol,
        http: HttpClient,
        runner: Runner | None = None,
        setup: ToolchainSetup | None = None,
    ) -> None:
        self._config = config
        self._console = console
        self._http = http
        self._runner = runner
        if setup is None:
            setup = DependencySetup(config=config, http=http, console=console)
        self._setup = setup
        self._github = GitHubClient(http, config.github_token)

    def validate_config(self, mode: ReleaseMode) -> Result[list[ExportPreset], RunError]:
        if isinstance(mode, PublishRelease):
            if not self._config.github_token:
                return Err(
                    RunError(
                        kind="missing_token",
                        message=(
                            "You must supply the GITHUB_TOKEN environment variable "
                            "to create a release."
                        ),
                        hint="Add `env: GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}` to the step",
                    )
                )
            if mode.repository is None:
                return Err(
                    RunError(
                        kind="missing_repository",
                        message=(
                            "GITHUB_REPOSITORY is not set; cannot tell where to create "
                            "the release."
                        ),
                    )
                )

        project = self._config.project_path
        presets_file = self._config.export_presets_path
        if not has_export_presets(presets_file):
            return Err(
                RunError(
                    kind="missing_export_presets",
                    message=(
                        f'No "{EXPORT_PRESETS_FILE}" found in {project}. Please be sure you have '
                        "defined at least 1 export from the Godot editor."
                    ),
                    hint="Check relative_project_path",
                )
            )

        presets = load_export_presets(presets_file)
        if isinstance(presets, Err):
            return Err(
                RunError(
                    kind="invalid_config",
                    message=f"{presets.error.path}: {presets.error.message}",
                )
            )

        seen: dict[str, str] = {}
        for preset in presets.value:
            key = sanitize_name(preset.name)
            if key in seen:
                return Err(
                    RunError(
                        kind="invalid_config",
                        message=(
                            f'Presets "{seen[key]}" and "{preset.name}" would both export '
                            f'to "{key}"'
                        ),
                        hint="Rename one of them in the Godot editor",
                    )
                )
            seen[key] = preset.name
        return Ok(presets.value)

    def resolve_release_version(self, repo: RepositoryInfo) -> Result[ReleaseDecision, RunError]:
        tag = latest_release_tag(
            self._github,
            repo,
            self._console,
            strict=self._config.strict_history_lookup,
        )
        if isinstance(tag, Err):
            return Err(RunError(kind="version_unresolved", message=tag.error.pretty()))

        decision = resolve_version(self._config.base_version, tag.value)
        if isinstance(decision, Err):
            return Err(
                RunError(
                    kind="version_unresolved",
                    message=(
                        "Could not establish a version for the release. Please check that "
                        '"base_version" is a https://semver.org/ style string.'
                    ),
                    hint=decision.error.message,
                )
            )
        return Ok(decision.value)

    def setup_working_path(self) -> Result[Path, RunError]:
        path = self._config.working_path
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(RunError(kind="io_error", message=f"Cannot create working path {path}: {e}"))
        self._console.info(f"Working path created {path}")
        return Ok(path)

    def export(
        self, toolchain: GodotToolchain, presets: list[ExportPreset]
    ) -> Result[list[ExportArtifact], RunError]:
        pipeline = ExportPipeline(
            config=self._config,
            console=self._console,
            executable=toolchain.executable,
            runner=self._runner,
        )
        return pipeline.run(presets)

    def publish(
        self, repo: RepositoryInfo, decision: ReleaseDecision, artifacts: list[ExportArtifact]
    ) -> Result[PublishedRelease, RunError]:
        publisher = ReleasePublisher(
            client=self._github,
            repo=repo,
            console=self._console,
            archives_dir=self._config.archives_path,
            draft=self._config.release_draft,
            prerelease=self._config.release_prerelease,
        )
        return publisher.publish(decision.version, artifacts).map_err(
            lambda e: RunError(kind="publish_failed", message=e.message, hint=e.hint)
        )

    def run(self) -> Result[RunSummary, RunError]:
        mode = select_mode(self._config)

        validated = self.validate_config(mode)
        if isinstance(validated, Err):
            return validated
        presets = validated.value

        decision: ReleaseDecision | None = None
        if isinstance(mode, PublishRelease) and mode.repository is not None:
            resolved = self.resolve_release_version(mode.repository)
            if isinstance(resolved, Err):
                return resolved
            decision = resolved.value
            self._console.info(f"Using release version {decision.tag}")

        working = self.setup_working_path()
        if isinstance(working, Err):
            return working

        with self._console.group("Godot setup"):
            toolchain = self._setup.run()
        if isinstance(toolchain, Err):
            return toolchain

        with self._console.group("Exporting"):
            exported = self.export(toolchain.value, presets)
        if isinstance(exported, Err):
            return exported
        artifacts = exported.value

        summary = RunSummary(mode=mode, decision=decision, artifacts=tuple(artifacts))
        if not artifacts:
            self._console.warning("No exports produced; nothing to publish or move")
            return Ok(summary)

        match mode:
            case PublishRelease(repository=repo) if repo is not None and decision is not None:
                with self._console.group(f"Create release {decision.tag}"):
                    published = self.publish(repo, decision, artifacts)
                if isinstance(published, Err):
                    return published
                return Ok(
                    RunSummary(
                        mode=mode,
                        decision=decision,
                        artifacts=summary.artifacts,
                        release=published.value,
                    )
                )
            case RelocateArtifacts(destination=destination):
                with self._console.group("Move exported files"):
                    moved = relocate_artifacts(artifacts, destination, self._console)
                if isinstance(moved, Err):
                    return moved
                return Ok(
                    RunSummary(mode=mode, artifacts=summary.artifacts, relocated=tuple(moved.value))
                )
            case _:
                # validate_config guarantees a repository in release mode
                raise AssertionError(f"unexpected release mode: {mode}")
