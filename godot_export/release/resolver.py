"""Next-version resolution.

Given the configured ``base_version`` and the latest release tag:

- no tag, or a tag that is not a semantic version: publish ``base``
- ``base`` newer than the tag: publish ``base`` (an explicit bump wins)
- otherwise: publish the tag's next patch version

so raising ``base_version`` always takes effect, and leaving it alone still
produces a strictly increasing series of releases.
"""

from __future__ import annotations

from godot_export.core.result import Result

from .errors import ReleaseError
from .model import ReleaseDecision, ReleaseReference
from .semver import SemVer, parse_base_version

__all__ = ["resolve_version"]


def resolve_version(
    base_version: str,
    latest_tag: str | None,
) -> Result[ReleaseDecision, ReleaseError]:
    """Decide which version this run publishes.

    Args:
        base_version: Configured base version text.
        latest_tag: Tag of the latest release, or None if there is none.

    Returns:
        Ok(ReleaseDecision), or Err if ``base_version`` does not parse.
    """
    return parse_base_version(base_version).map(lambda base: _decide(base, latest_tag))


def _decide(base: SemVer, latest_tag: str | None) -> ReleaseDecision:
    if latest_tag is None:
        return ReleaseDecision(version=base, reason="no_history")

    latest = ReleaseReference.from_tag(latest_tag)
    if latest.version is None:
        return ReleaseDecision(version=base, reason="history_unparseable", latest=latest)

    if base > latest.version:
        return ReleaseDecision(version=base, reason="base_newer", latest=latest)

    return ReleaseDecision(
        version=latest.version.bump_patch(),
        reason="auto_increment",
        latest=latest,
    )
