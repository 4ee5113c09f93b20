"""Latest-release lookup.

A repository with no releases answers the ``releases/latest`` call with an
error, and the lookup deliberately does not spend a second API call to tell
"no releases" apart from a failed query: both become "no prior version" and
are only logged. Pass ``strict=True`` to surface failures other than 404
as errors instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from godot_export.core.result import Err, Ok, Result

from .errors import ReleaseError

if TYPE_CHECKING:
    from godot_export.core.config import RepositoryInfo
    from godot_export.github.client import GitHubClient
    from godot_export.output.console import ConsoleProtocol

__all__ = ["latest_release_tag"]


def latest_release_tag(
    client: GitHubClient,
    repo: RepositoryInfo,
    console: ConsoleProtocol,
    *,
    strict: bool = False,
) -> Result[str | None, ReleaseError]:
    """Tag of the latest published release, or None if there is none."""
    result = client.latest_release_tag(repo)
    if isinstance(result, Ok):
        console.info(f"Latest release: {result.value}")
        return Ok(result.value)

    error = result.error
    if strict and not error.is_not_found:
        return Err(
            ReleaseError(
                kind="history_unavailable",
                message=f"Could not query releases of {repo}: {error}",
            )
        )

    console.info("No latest release found")
    return Ok(None)
