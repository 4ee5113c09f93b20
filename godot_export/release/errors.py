"""Error payload for version resolution and release publishing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_base_version",
    "history_unavailable",
    "release_create_failed",
    "asset_upload_failed",
    "asset_missing",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Release-side failure.

    ``kind`` is stable and drives exit-code mapping; ``message`` and ``hint``
    are for humans.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
