from __future__ import annotations

from pathlib import Path

from godot_export.core.result import Err
from godot_export.tools.download import Downloader, cache_filename
from godot_export.tools.http import HttpError, MockHttpClient

URL = "https://downloads.tuxfamily.org/godot/4.2.1/Godot_v4.2.1-stable_linux.x86_64.zip"


def test_cache_path_keeps_filename(tmp_path: Path) -> None:
    downloader = Downloader(MockHttpClient(), tmp_path)
    path = downloader.cache_path(URL)

    assert path.parent == tmp_path
    assert path.name.endswith("_Godot_v4.2.1-stable_linux.x86_64.zip")
    assert len(path.name.split("_", 1)[0]) == 8


def test_cache_path_differs_per_url(tmp_path: Path) -> None:
    downloader = Downloader(MockHttpClient(), tmp_path)
    assert downloader.cache_path(URL) != downloader.cache_path(URL + "?mirror=2")


def test_download_then_cache_hit(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_download(URL, b"zipdata")
    downloader = Downloader(http, tmp_path / "cache")

    first = downloader.download(URL).unwrap()
    second = downloader.download(URL).unwrap()

    assert not first.from_cache
    assert first.path.read_bytes() == b"zipdata"
    assert second.from_cache
    assert second.path == first.path
    assert http.calls == [("download", URL)]


def test_failed_download_leaves_no_file(tmp_path: Path) -> None:
    http = MockHttpClient()
    http.set_download(URL, HttpError(URL, 503, "Service Unavailable"))
    downloader = Downloader(http, tmp_path)

    result = downloader.download(URL)

    assert isinstance(result, Err)
    assert list(tmp_path.iterdir()) == []


def test_cache_filename_is_stable() -> None:
    assert cache_filename(URL) == cache_filename(URL)
    assert cache_filename("https://example.com/").endswith("_download")
