"""Host OS detection.

Where Godot keeps its data directory, and how the editor binary is named
inside its download archive, both depend on the host OS.
"""

from __future__ import annotations

import sys
from enum import Enum
from functools import lru_cache

__all__ = ["Platform", "detect_platform"]


class Platform(Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @property
    def is_unix(self) -> bool:
        """Binaries extracted from a zip need the executable bit set."""
        return self in (Platform.LINUX, Platform.MACOS)

    @classmethod
    def from_sys_platform(cls, value: str) -> Platform:
        """Map a ``sys.platform`` string (``linux``, ``darwin``, ``win32``...)."""
        value = value.lower()
        for prefix, platform in _SYS_PLATFORM_PREFIXES:
            if value.startswith(prefix):
                return platform
        return cls.UNKNOWN


_SYS_PLATFORM_PREFIXES: tuple[tuple[str, Platform], ...] = (
    ("linux", Platform.LINUX),
    ("darwin", Platform.MACOS),
    ("win32", Platform.WINDOWS),
    ("cygwin", Platform.WINDOWS),
    ("msys", Platform.WINDOWS),
)


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    return Platform.from_sys_platform(sys.platform)
