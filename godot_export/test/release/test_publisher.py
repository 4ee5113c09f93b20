"""Tests for release/publisher.py - release creation and asset upload."""

from __future__ import annotations

import zipfile
from pathlib import Path

from godot_export.core.config import RepositoryInfo
from godot_export.core.result import Err, Ok
from godot_export.github.client import GitHubClient
from godot_export.godot.artifacts import ExportArtifact
from godot_export.godot.presets import ExportPreset
from godot_export.output.console import MockConsole
from godot_export.release.publisher import ReleasePublisher
from godot_export.release.semver import SemVer
from godot_export.tools.http import HttpError, MockHttpClient

REPO = RepositoryInfo(owner="o", repo="r")
RELEASES_URL = "https://api.github.com/repos/o/r/releases"
UPLOAD_URL = "https://uploads.github.com/repos/o/r/releases/1/assets"


def _release_json() -> dict[str, object]:
    return {
        "id": 1,
        "tag_name": "v1.0.1",
        "html_url": "https://github.com/o/r/releases/tag/v1.0.1",
        "upload_url": UPLOAD_URL + "{?name,label}",
    }


def _publisher(
    http: MockHttpClient, tmp_path: Path, console: MockConsole | None = None
) -> ReleasePublisher:
    return ReleasePublisher(
        client=GitHubClient(http, "token"),
        repo=REPO,
        console=console or MockConsole(),
        archives_dir=tmp_path / "archives",
    )


def _dir_artifact(tmp_path: Path, name: str) -> ExportArtifact:
    build = tmp_path / "builds" / name
    build.mkdir(parents=True)
    (build / "game.x86_64").write_bytes(b"ELF")
    (build / "game.pck").write_bytes(b"PCK")
    return ExportArtifact(preset=ExportPreset(0, name, "Linux"), path=build)


def test_publish_creates_release_and_uploads(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_post(RELEASES_URL, _release_json())
    http.set_post(UPLOAD_URL, {"browser_download_url": "https://example.com/asset"})
    console = MockConsole()

    linux = _dir_artifact(tmp_path, "Linux")
    web_zip = tmp_path / "Web.zip"
    with zipfile.ZipFile(web_zip, "w") as zf:
        zf.writestr("index.html", "<html/>")
    web = ExportArtifact(preset=ExportPreset(1, "Web", "Web"), path=web_zip)

    result = _publisher(http, tmp_path, console).publish(SemVer(1, 0, 1), [linux, web])

    assert isinstance(result, Ok)
    published = result.value
    assert published.release_id == 1
    assert published.tag_name == "v1.0.1"
    assert published.assets == ("Linux.zip", "Web.zip")

    create_url, payload = http.posted[0]
    assert create_url == RELEASES_URL
    assert payload == {"tag_name": "v1.0.1", "name": "v1.0.1", "draft": False, "prerelease": False}

    upload_urls = [url for kind, url in http.calls if kind == "post_bytes"]
    assert upload_urls == [f"{UPLOAD_URL}?name=Linux.zip", f"{UPLOAD_URL}?name=Web.zip"]
    assert http.headers[1]["Content-Type"] == "application/zip"

    with zipfile.ZipFile(tmp_path / "archives" / "Linux.zip") as zf:
        assert sorted(zf.namelist()) == ["game.pck", "game.x86_64"]

    assert "info: Created release v1.0.1" in console.messages
    assert console.find("Uploading Linux.zip")


def test_plain_file_uses_octet_stream(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_post(RELEASES_URL, _release_json())
    http.set_post(UPLOAD_URL, {})
    exe = tmp_path / "game.exe"
    exe.write_bytes(b"MZ")

    artifact = ExportArtifact(preset=ExportPreset(0, "Windows", "Windows Desktop"), path=exe)
    result = _publisher(http, tmp_path).publish(SemVer(1, 0, 1), [artifact])

    assert isinstance(result, Ok)
    assert http.headers[-1]["Content-Type"] == "application/octet-stream"


def test_missing_artifact_fails_before_release_is_created(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_post(RELEASES_URL, _release_json())
    artifact = ExportArtifact(preset=ExportPreset(0, "Linux", "Linux"), path=tmp_path / "gone")

    result = _publisher(http, tmp_path).publish(SemVer(1, 0, 0), [artifact])

    assert isinstance(result, Err)
    assert result.error.kind == "asset_missing"
    assert http.calls == []


def test_create_failure(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_post(RELEASES_URL, HttpError(url=RELEASES_URL, status=403, message="Forbidden"))

    result = _publisher(http, tmp_path).publish(SemVer(1, 0, 0), [_dir_artifact(tmp_path, "A")])

    assert isinstance(result, Err)
    assert result.error.kind == "release_create_failed"
    assert "v1.0.0" in result.error.message
    assert result.error.hint is not None


def test_upload_failure(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_post(RELEASES_URL, _release_json())
    http.set_post(UPLOAD_URL, HttpError(url=UPLOAD_URL, status=422, message="already_exists"))

    result = _publisher(http, tmp_path).publish(SemVer(1, 0, 1), [_dir_artifact(tmp_path, "A")])

    assert isinstance(result, Err)
    assert result.error.kind == "asset_upload_failed"
    assert "A.zip" in result.error.message


def test_draft_and_prerelease_flags(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_post(RELEASES_URL, _release_json())
    publisher = ReleasePublisher(
        client=GitHubClient(http, "token"),
        repo=REPO,
        console=MockConsole(),
        archives_dir=tmp_path / "archives",
        draft=True,
        prerelease=True,
    )

    assert isinstance(publisher.publish(SemVer(1, 0, 1), []), Ok)
    _, payload = http.posted[0]
    assert payload["draft"] is True
    assert payload["prerelease"] is True
