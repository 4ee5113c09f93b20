"""Minimal GitHub REST client for releases.

Only the three calls the pipeline needs: read the latest release, create a
release, and upload an asset to it. Transport goes through ``HttpClient`` so
tests run against ``MockHttpClient``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from godot_export.core.result import Err, Ok, Result
from godot_export.core.structured import get_int, get_str
from godot_export.tools.http import HttpError

if TYPE_CHECKING:
    from godot_export.core.config import RepositoryInfo
    from godot_export.tools.http import HttpClient

__all__ = ["GitHubClient", "GitHubRelease", "API_URL"]

API_URL = "https://api.github.com"

# upload_url is an RFC 6570 template: ".../assets{?name,label}"
_URI_TEMPLATE_RE = re.compile(r"\{[^}]*\}$")


@dataclass(frozen=True, slots=True)
class GitHubRelease:
    id: int
    tag_name: str
    html_url: str
    upload_url: str

    @classmethod
    def from_json(cls, url: str, data: dict[str, Any]) -> Result[GitHubRelease, HttpError]:
        release_id = get_int(data, "id")
        tag_name = get_str(data, "tag_name")
        upload_url = get_str(data, "upload_url")
        if release_id is None or tag_name is None:
            return Err(HttpError(url=url, status=0, message="Missing id/tag_name in release"))
        if upload_url is None:
            return Err(HttpError(url=url, status=0, message="Missing upload_url in release"))
        return Ok(
            cls(
                id=release_id,
                tag_name=tag_name,
                html_url=get_str(data, "html_url") or "",
                upload_url=_URI_TEMPLATE_RE.sub("", upload_url),
            )
        )


class GitHubClient:
    """Authenticated access to one repository's releases."""

    def __init__(self, http: HttpClient, token: str | None, *, api_url: str = API_URL) -> None:
        self._http = http
        self._token = token
        self._api_url = api_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def latest_release_tag(self, repo: RepositoryInfo) -> Result[str, HttpError]:
        """Tag of the most recent published (non-draft, non-prerelease) release.

        GitHub answers 404 when the repository has no releases at all.
        """
        url = f"{self._api_url}/repos/{repo.full_name}/releases/latest"
        result = self._http.get_json(url, headers=self._headers())
        if isinstance(result, Err):
            return result

        tag_name = get_str(result.value, "tag_name")
        if tag_name is None:
            return Err(HttpError(url=url, status=0, message="Missing tag_name in response"))
        return Ok(tag_name)

    def create_release(
        self,
        repo: RepositoryInfo,
        *,
        tag_name: str,
        name: str,
        draft: bool = False,
        prerelease: bool = False,
    ) -> Result[GitHubRelease, HttpError]:
        url = f"{self._api_url}/repos/{repo.full_name}/releases"
        payload: dict[str, object] = {
            "tag_name": tag_name,
            "name": name,
            "draft": draft,
            "prerelease": prerelease,
        }
        result = self._http.post_json(url, payload, headers=self._headers())
        if isinstance(result, Err):
            return result
        return GitHubRelease.from_json(url, result.value)

    def upload_asset(
        self,
        release: GitHubRelease,
        *,
        name: str,
        data: bytes,
        content_type: str,
    ) -> Result[str, HttpError]:
        """Upload ``data`` as asset ``name``; returns the asset download URL."""
        url = f"{release.upload_url}?name={quote(name)}"
        result = self._http.post_bytes(url, data, content_type, headers=self._headers())
        if isinstance(result, Err):
            return result
        return Ok(get_str(result.value, "browser_download_url") or name)
