"""Semantic version parsing and precedence (https://semver.org, 2.0.0).

``parse_version`` never raises: anything that is not a semantic version
returns None. Release tags are usually written ``v1.2.3``, so one leading
``v``/``V``/``=`` marker is accepted and dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

from godot_export.core.result import Err, Ok, Result

from .errors import ReleaseError

__all__ = ["SemVer", "parse_version", "parse_base_version"]

_NUM = r"0|[1-9]\d*"
_PRE_ID = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_ID = r"[0-9a-zA-Z-]+"

_SEMVER_RE = re.compile(
    rf"^(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre>{_PRE_ID}(?:\.{_PRE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?$"
)

_PREFIXES = ("v", "V", "=")


def _pre_key(ident: str) -> tuple[int, int, str]:
    # Numeric identifiers sort below alphanumeric ones.
    if ident.isdigit():
        return (0, int(ident), "")
    return (1, 0, ident)


@total_ordering
@dataclass(frozen=True, slots=True)
class SemVer:
    """An immutable semantic version.

    Equality and ordering follow semver precedence, so build metadata is
    ignored by both: ``SemVer(1, 0, 0, build=("a",)) == SemVer(1, 0, 0)``.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = field(default=(), compare=False)

    def _precedence(self) -> tuple[object, ...]:
        # A release (no pre-release) outranks any pre-release of the same core.
        pre = tuple(_pre_key(p) for p in self.prerelease)
        return (self.major, self.minor, self.patch, not self.prerelease, pre)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() == other._precedence()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def bump_patch(self) -> SemVer:
        """Next patch release; pre-release and build metadata are dropped."""
        return SemVer(self.major, self.minor, self.patch + 1)

    def format(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += "-" + ".".join(self.prerelease)
        if self.build:
            out += "+" + ".".join(self.build)
        return out

    def to_tag(self) -> str:
        return f"v{self.format()}"

    def __str__(self) -> str:
        return self.format()


def parse_version(text: str | None) -> SemVer | None:
    """Parse ``text`` as a semantic version, or return None."""
    if text is None:
        return None
    s = text.strip()
    if s[:1] in _PREFIXES:
        s = s[1:]

    m = _SEMVER_RE.match(s)
    if m is None:
        return None

    pre = m.group("pre")
    build = m.group("build")
    return SemVer(
        int(m.group("major")),
        int(m.group("minor")),
        int(m.group("patch")),
        prerelease=tuple(pre.split(".")) if pre else (),
        build=tuple(build.split(".")) if build else (),
    )


def parse_base_version(text: str) -> Result[SemVer, ReleaseError]:
    """Parse the configured ``base_version``; unlike tags, failure is fatal."""
    version = parse_version(text)
    if version is None:
        return Err(
            ReleaseError(
                kind="invalid_base_version",
                message=f"base_version is not a semantic version: {text!r}",
                hint='Use a https://semver.org/ style string, e.g. "1.0.0"',
            )
        )
    return Ok(version)
