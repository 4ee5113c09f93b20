"""Version resolution and GitHub release publishing."""

from .errors import ReleaseError
from .history import latest_release_tag
from .model import PublishedRelease, ReleaseDecision, ReleaseReference
from .publisher import ReleasePublisher
from .resolver import resolve_version
from .semver import SemVer, parse_base_version, parse_version

__all__ = [
    "PublishedRelease",
    "ReleaseDecision",
    "ReleaseError",
    "ReleasePublisher",
    "ReleaseReference",
    "SemVer",
    "latest_release_tag",
    "parse_base_version",
    "parse_version",
    "resolve_version",
]
