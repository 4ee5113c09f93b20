"""Subprocess execution with Result-based error handling.

Godot is the only external program this tool runs. Its exit status is the
only reliable signal that an export worked (it prints errors but still writes
partial output), so a non-zero exit, a timeout and a missing binary all come
back as a ``ProcessError`` value.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from godot_export.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]

_TAIL_LINES = 20


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that did not exit cleanly.

    ``returncode`` is -1 when the process never ran or was killed on timeout;
    ``detail`` then holds the OS or timeout message, otherwise the last lines
    of captured stderr (empty when output was streamed).
    """

    command: tuple[str, ...]
    returncode: int
    detail: str = ""

    @property
    def program(self) -> str:
        return Path(self.command[0]).name if self.command else "?"

    def __str__(self) -> str:
        if self.returncode == -1:
            return f"{self.program}: {self.detail}"
        if self.detail:
            return f"{self.program} exited with code {self.returncode}: {self.detail}"
        return f"{self.program} exited with code {self.returncode}"


def _tail(text: str | None) -> str:
    if not text:
        return ""
    return "\n".join(text.strip().splitlines()[-_TAIL_LINES:])


def run(
    cmd: list[str],
    cwd: Path,
    *,
    capture: bool = True,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd``.

    Args:
        cmd: Program and arguments.
        cwd: Working directory.
        capture: Capture stdout/stderr; when False output streams to the
            terminal, so Godot's progress shows up in the CI log.
        timeout: Seconds before the process is killed.

    Returns:
        Ok(stdout), with "" when not capturing, or Err(ProcessError).
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(ProcessError(command, -1, f"timed out after {timeout:g}s"))
    except OSError as e:
        return Err(ProcessError(command, -1, str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(command, proc.returncode, _tail(proc.stderr)))
    return Ok(proc.stdout or "")
