"""Process exit codes.

The CI runner only sees the exit status, so every fatal pipeline error maps
to one of these codes. Values are part of the CLI contract and must stay
stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: Configuration error (missing token, bad base_version, no presets)
    - 2: Environment error (Godot executable or templates could not be set up)
    - 3: Build error (a preset export failed)
    - 4: Network error (download or GitHub API unreachable)
    - 5: I/O error (working path, moving artifacts)
    - 6: Release error (release creation or asset upload failed)
    """

    OK = 0
    CONFIG_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    RELEASE_ERROR = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
