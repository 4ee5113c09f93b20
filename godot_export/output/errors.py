"""Error presentation and exit-code mapping for failed runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from godot_export.core.errors import ErrorCode
from godot_export.output.console import Style

if TYPE_CHECKING:
    from godot_export.output.console import ConsoleProtocol
    from godot_export.services.errors import RunError

__all__ = ["print_run_error", "run_error_exit_code"]


def print_run_error(error: RunError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def run_error_exit_code(error: RunError) -> int:
    match error.kind:
        case (
            "invalid_config"
            | "missing_token"
            | "missing_repository"
            | "missing_export_presets"
            | "version_unresolved"
        ):
            return int(ErrorCode.CONFIG_ERROR)
        case "setup_failed":
            return int(ErrorCode.ENV_ERROR)
        case "download_failed":
            return int(ErrorCode.NETWORK_ERROR)
        case "export_failed":
            return int(ErrorCode.BUILD_ERROR)
        case "io_error" | "relocate_failed":
            return int(ErrorCode.IO_ERROR)
        case "publish_failed":
            return int(ErrorCode.RELEASE_ERROR)
    return int(ErrorCode.BUILD_ERROR)
