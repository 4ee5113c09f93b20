"""Locations Godot reads from outside the project.

Godot resolves export templates relative to its per-user data directory,
so the working path defaults to that directory:

- Linux: ``~/.local/share/godot`` (or ``$XDG_DATA_HOME/godot``)
- macOS: ``~/Library/Application Support/Godot``
- Windows: ``%APPDATA%/Godot``
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from .detection import Platform, detect_platform

__all__ = ["home", "godot_data_dir"]


def home(env: Mapping[str, str] | None = None) -> Path:
    """Home directory, honouring HOME/USERPROFILE for CI containers."""
    env = os.environ if env is None else env
    key = "USERPROFILE" if detect_platform() == Platform.WINDOWS else "HOME"
    value = env.get(key)
    if value:
        return Path(value)
    return Path.home()


def godot_data_dir(
    platform: Platform | None = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Godot's user data directory for ``platform`` (defaults to the host)."""
    platform = detect_platform() if platform is None else platform
    env = os.environ if env is None else env

    match platform:
        case Platform.WINDOWS:
            app_data = env.get("APPDATA")
            if app_data:
                return Path(app_data) / "Godot"
            return home(env) / "AppData" / "Roaming" / "Godot"
        case Platform.MACOS:
            return home(env) / "Library" / "Application Support" / "Godot"
        case _:
            xdg = env.get("XDG_DATA_HOME")
            if xdg:
                return Path(xdg) / "godot"
            return home(env) / ".local" / "share" / "godot"
