from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .semver import SemVer, parse_version

DecisionReason = Literal[
    "no_history",
    "history_unparseable",
    "base_newer",
    "auto_increment",
]


@dataclass(frozen=True, slots=True)
class ReleaseReference:
    """A published release tag and, if it is one, its semantic version."""

    tag_name: str
    version: SemVer | None

    @classmethod
    def from_tag(cls, tag_name: str) -> ReleaseReference:
        return cls(tag_name=tag_name, version=parse_version(tag_name))


@dataclass(frozen=True, slots=True)
class ReleaseDecision:
    """The version chosen for this run and why."""

    version: SemVer
    reason: DecisionReason
    latest: ReleaseReference | None = None

    @property
    def tag(self) -> str:
        return self.version.to_tag()


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    """A release created on GitHub plus the assets attached to it."""

    release_id: int
    tag_name: str
    html_url: str
    assets: tuple[str, ...] = ()
