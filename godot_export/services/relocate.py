"""Move exported artifacts into the project's ``exports`` directory.

Used when no release is created, so later workflow steps (e.g.
``actions/upload-artifact``) find the builds at a predictable path.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path

from godot_export.core.result import Err, Ok, Result
from godot_export.godot.artifacts import ExportArtifact
from godot_export.output.console import ConsoleProtocol

from .errors import RunError

__all__ = ["relocate_artifacts"]


def relocate_artifacts(
    artifacts: Sequence[ExportArtifact],
    destination: Path,
    console: ConsoleProtocol,
) -> Result[list[Path], RunError]:
    """Move each artifact to ``destination/<artifact name>``, replacing old copies."""
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(RunError(kind="relocate_failed", message=f"Cannot create {destination}: {e}"))

    moved: list[Path] = []
    for artifact in artifacts:
        target = destination / artifact.name
        try:
            if target.is_dir():
                shutil.rmtree(target)
            elif target.exists():
                target.unlink()
            shutil.move(str(artifact.path), str(target))
        except OSError as e:
            return Err(
                RunError(
                    kind="relocate_failed",
                    message=f"Failed to move {artifact.path} to {target}: {e}",
                )
            )
        console.print(f"Moved {artifact.name} -> {target}")
        moved.append(target)
    return Ok(moved)
