"""Publish a GitHub release and attach the exported artifacts.

The release is tagged and named ``v<version>``. Build directories are zipped
into ``archives_dir`` first; artifacts that are already zips are uploaded
as they are.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from godot_export.core.result import Err, Ok, Result
from godot_export.godot.artifacts import ExportArtifact, sanitize_name, zip_directory

from .errors import ReleaseError
from .model import PublishedRelease
from .semver import SemVer

if TYPE_CHECKING:
    from godot_export.core.config import RepositoryInfo
    from godot_export.github.client import GitHubClient
    from godot_export.output.console import ConsoleProtocol

__all__ = ["ReleasePublisher"]

_ZIP_CONTENT_TYPE = "application/zip"
_BINARY_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class _Asset:
    name: str
    path: Path

    @property
    def content_type(self) -> str:
        return _ZIP_CONTENT_TYPE if self.path.suffix.lower() == ".zip" else _BINARY_CONTENT_TYPE


class ReleasePublisher:
    """Creates one release per run on ``repo``."""

    def __init__(
        self,
        *,
        client: GitHubClient,
        repo: RepositoryInfo,
        console: ConsoleProtocol,
        archives_dir: Path,
        draft: bool = False,
        prerelease: bool = False,
    ) -> None:
        self._client = client
        self._repo = repo
        self._console = console
        self._archives_dir = archives_dir
        self._draft = draft
        self._prerelease = prerelease

    def _asset_for(self, artifact: ExportArtifact) -> Result[_Asset, ReleaseError]:
        if not artifact.path.exists():
            return Err(
                ReleaseError(kind="asset_missing", message=f"artifact not found: {artifact.path}")
            )
        if artifact.path.is_file():
            return Ok(_Asset(name=artifact.path.name, path=artifact.path))

        name = f"{sanitize_name(artifact.preset.name)}.zip"
        try:
            zipped = zip_directory(artifact.path, self._archives_dir / name)
        except OSError as e:
            return Err(
                ReleaseError(kind="asset_missing", message=f"failed to archive {artifact.path}: {e}")
            )
        return Ok(_Asset(name=name, path=zipped))

    def publish(
        self,
        version: SemVer,
        artifacts: Sequence[ExportArtifact],
    ) -> Result[PublishedRelease, ReleaseError]:
        """Create release ``v<version>`` and upload every artifact.

        Assets are prepared before the release is created, so a missing
        artifact does not leave an empty release behind. An upload failure
        stops the run; the release already created is left as is.
        """
        assets: list[_Asset] = []
        for artifact in artifacts:
            asset = self._asset_for(artifact)
            if isinstance(asset, Err):
                return asset
            assets.append(asset.value)

        tag = version.to_tag()
        created = self._client.create_release(
            self._repo,
            tag_name=tag,
            name=tag,
            draft=self._draft,
            prerelease=self._prerelease,
        )
        if isinstance(created, Err):
            return Err(
                ReleaseError(
                    kind="release_create_failed",
                    message=f"Failed to create release {tag}: {created.error}",
                    hint="Check that GITHUB_TOKEN has contents: write permission",
                )
            )
        release = created.value
        self._console.info(f"Created release {tag}")

        uploaded: list[str] = []
        for asset in assets:
            self._console.print(f"Uploading {asset.name}")
            try:
                data = asset.path.read_bytes()
            except OSError as e:
                return Err(
                    ReleaseError(kind="asset_missing", message=f"cannot read {asset.path}: {e}")
                )
            result = self._client.upload_asset(
                release, name=asset.name, data=data, content_type=asset.content_type
            )
            if isinstance(result, Err):
                return Err(
                    ReleaseError(
                        kind="asset_upload_failed",
                        message=f"Failed to upload {asset.name}: {result.error}",
                    )
                )
            uploaded.append(asset.name)

        return Ok(
            PublishedRelease(
                release_id=release.id,
                tag_name=release.tag_name,
                html_url=release.html_url,
                assets=tuple(uploaded),
            )
        )
