"""Platform abstraction layer."""

from .detection import Platform, detect_platform
from .paths import godot_data_dir, home
from .process import ProcessError, run

__all__ = [
    # detection
    "Platform",
    "detect_platform",
    # paths
    "godot_data_dir",
    "home",
    # process
    "ProcessError",
    "run",
]
