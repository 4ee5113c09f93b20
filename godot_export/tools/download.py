"""Cached downloads for the Godot executable and export templates.

Archives are kept under ``<working_path>/downloads``, one file per URL, so a
runner that restores that directory from its cache skips the download (the
export templates alone are close to a gigabyte).
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from godot_export.core.result import Err, Ok, Result
from godot_export.tools.http import HttpError

if TYPE_CHECKING:
    from collections.abc import Callable

    from godot_export.tools.http import HttpClient

__all__ = ["Downloader", "DownloadResult", "cache_filename"]


def cache_filename(url: str) -> str:
    """``<sha8>_<basename>``; the basename keeps the ``.zip``/``.tpz`` suffix."""
    basename = Path(unquote(urlparse(url).path)).name or "download"
    return f"{hashlib.sha256(url.encode()).hexdigest()[:8]}_{basename}"


@dataclass(frozen=True, slots=True)
class DownloadResult:
    path: Path
    from_cache: bool


class Downloader:
    def __init__(self, http: HttpClient, cache_dir: Path) -> None:
        self._http = http
        self._cache_dir = cache_dir

    def cache_path(self, url: str) -> Path:
        return self._cache_dir / cache_filename(url)

    def download(
        self,
        url: str,
        *,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[DownloadResult, HttpError]:
        """Fetch ``url`` into the cache unless it is already there.

        The body is written to ``<name>.part`` and renamed when complete, so
        an interrupted download is never mistaken for a cached archive.
        """
        target = self.cache_path(url)
        if target.is_file():
            return Ok(DownloadResult(path=target, from_cache=True))

        partial = target.with_name(target.name + ".part")
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=f"Cannot create cache dir: {e}"))

        result = self._http.download(url, partial, progress=progress)
        if isinstance(result, Err):
            partial.unlink(missing_ok=True)
            return result

        try:
            partial.replace(target)
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=f"Cannot store download: {e}"))
        return Ok(DownloadResult(path=target, from_cache=False))
