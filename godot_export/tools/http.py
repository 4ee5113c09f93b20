"""HTTP client abstraction.

Used for two things: downloading the Godot executable/templates, and talking
to the GitHub REST API (release lookup, release creation, asset upload).

- HttpClient: Protocol for HTTP operations (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Canned responses for testing
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, cast, runtime_checkable

from godot_export import __version__
from godot_export.core.result import Err, Ok, Result
from godot_export.core.structured import as_str_dict

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]

_CHUNK_SIZE = 1 << 16

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations."""

    def get_json(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        """Fetch URL and parse the body as a JSON object."""
        ...

    def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        """POST a JSON body and parse the JSON object response."""
        ...

    def post_bytes(
        self,
        url: str,
        data: bytes,
        content_type: str,
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        """POST raw bytes (asset upload) and parse the JSON object response."""
        ...

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to ``dest``; ``progress(downloaded, total)`` is optional."""
        ...


def _parse_object(url: str, body: bytes) -> Result[dict[str, Any], HttpError]:
    try:
        data_obj: object = json.loads(body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(HttpError(url=url, status=0, message="Expected JSON object"))
    return Ok(cast(dict[str, Any], data))


def _error_message(e: urllib.error.HTTPError) -> str:
    """GitHub puts the useful part ("Validation Failed", ...) in a JSON body."""
    try:
        body = as_str_dict(json.loads(e.read().decode("utf-8")))
    except (OSError, ValueError):
        body = None
    message = body.get("message") if body else None
    return message if isinstance(message, str) and message else str(e.reason)


def _as_http_error(url: str, exc: Exception) -> HttpError:
    match exc:
        case urllib.error.HTTPError():
            return HttpError(url=url, status=exc.code, message=_error_message(exc))
        case urllib.error.URLError():
            return HttpError(url=url, status=0, message=str(exc.reason))
        case TimeoutError():
            return HttpError(url=url, status=0, message="Request timed out")
        case _:
            return HttpError(url=url, status=0, message=str(exc))


class RealHttpClient:
    """HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 60.0, user_agent: str | None = None) -> None:
        self.timeout = timeout
        self.user_agent = user_agent or f"godot-export/{__version__}"
        self._ssl_context = ssl.create_default_context()

    def _build(
        self,
        url: str,
        *,
        method: str = "GET",
        data: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> urllib.request.Request:
        all_headers = {"User-Agent": self.user_agent, **(headers or {})}
        return urllib.request.Request(url, data=data, headers=all_headers, method=method)

    def _fetch_object(self, req: urllib.request.Request) -> Result[dict[str, Any], HttpError]:
        url = req.full_url
        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as r:
                body = r.read()
        except (OSError, ValueError) as e:
            return Err(_as_http_error(url, e))
        return _parse_object(url, body)

    def get_json(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        return self._fetch_object(self._build(url, headers=headers))

    def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        body = json.dumps(dict(payload)).encode("utf-8")
        all_headers = {"Content-Type": "application/json", **(headers or {})}
        return self._fetch_object(self._build(url, method="POST", data=body, headers=all_headers))

    def post_bytes(
        self,
        url: str,
        data: bytes,
        content_type: str,
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        all_headers = {
            "Content-Type": content_type,
            "Content-Length": str(len(data)),
            **(headers or {}),
        }
        return self._fetch_object(self._build(url, method="POST", data=data, headers=all_headers))

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        req = self._build(url)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with (
                urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as r,
                dest.open("wb") as f,
            ):
                total = int(r.headers.get("Content-Length") or 0)
                done = 0
                while chunk := r.read(_CHUNK_SIZE):
                    f.write(chunk)
                    done += len(chunk)
                    if progress:
                        progress(done, total)
        except (OSError, ValueError) as e:
            return Err(_as_http_error(url, e))
        return Ok(dest)


class MockHttpClient:
    """Mock HTTP client with per-URL canned responses.

    Usage:
        client = MockHttpClient()
        client.set_json("https://api.github.com/repos/o/r/releases/latest", {"tag_name": "v1.0.0"})
        client.set_post("https://api.github.com/repos/o/r/releases", {"id": 1, ...})
    """

    def __init__(self) -> None:
        self._json_responses: dict[str, dict[str, Any] | HttpError] = {}
        self._post_responses: dict[str, dict[str, Any] | HttpError] = {}
        self._download_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []
        self.posted: list[tuple[str, object]] = []
        self.headers: list[dict[str, str]] = []

    def set_json(self, url: str, response: dict[str, Any] | HttpError) -> None:
        self._json_responses[url] = response

    def set_post(self, url: str, response: dict[str, Any] | HttpError) -> None:
        """Set the response for POSTs to ``url`` (query string ignored)."""
        self._post_responses[url] = response

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download_responses[url] = response

    def _lookup(self, table: dict[str, T | HttpError], url: str) -> Result[T, HttpError]:
        key = url if url in table else url.split("?", 1)[0]
        if key not in table:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        response = table[key]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_json(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> Result[dict[str, Any], HttpError]:
        self.calls.append(("get_json", url))
        self.headers.append(dict(headers or {}))
        return self._lookup(self._json_responses, url)

    def post_json(
        self,
        url: str,
        payload: Mapping[str, object],
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        self.calls.append(("post_json", url))
        self.posted.append((url, dict(payload)))
        self.headers.append(dict(headers or {}))
        return self._lookup(self._post_responses, url)

    def post_bytes(
        self,
        url: str,
        data: bytes,
        content_type: str,
        headers: Mapping[str, str] | None = None,
    ) -> Result[dict[str, Any], HttpError]:
        self.calls.append(("post_bytes", url))
        self.posted.append((url, data))
        self.headers.append({"Content-Type": content_type, **dict(headers or {})})
        return self._lookup(self._post_responses, url)

    def download(
        self,
        url: str,
        dest: Path,
        progress: Callable[[int, int], None] | None = None,
    ) -> Result[Path, HttpError]:
        self.calls.append(("download", url))
        result = self._lookup(self._download_responses, url)
        if isinstance(result, Err):
            return result

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(result.value)
        if progress:
            progress(len(result.value), len(result.value))
        return Ok(dest)
