"""Run-level error returned by the orchestrator when a stage fails."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RunErrorKind = Literal[
    "invalid_config",
    "missing_token",
    "missing_repository",
    "missing_export_presets",
    "version_unresolved",
    "io_error",
    "setup_failed",
    "download_failed",
    "export_failed",
    "publish_failed",
    "relocate_failed",
]


@dataclass(frozen=True, slots=True)
class RunError:
    """First fatal error of a run; ``kind`` selects the exit code."""

    kind: RunErrorKind
    message: str
    hint: str | None = None
