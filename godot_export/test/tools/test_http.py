"""Tests for tools/http.py: MockHttpClient, HttpError and urllib error mapping."""

from __future__ import annotations

import io
import urllib.error
from email.message import Message
from pathlib import Path

from godot_export.core.result import Err, Ok
from godot_export.tools.http import (
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
    _as_http_error,
)


def test_clients_satisfy_protocol() -> None:
    assert isinstance(MockHttpClient(), HttpClient)
    assert isinstance(RealHttpClient(), HttpClient)


def test_http_error_str() -> None:
    assert str(HttpError("https://x", 404, "Not Found")) == "HTTP 404: Not Found (https://x)"
    assert str(HttpError("https://x", 0, "timed out")) == "timed out (https://x)"
    assert HttpError("https://x", 404, "").is_not_found


class TestMockHttpClient:
    def test_unknown_url_is_404(self) -> None:
        result = MockHttpClient().get_json("https://nowhere")
        assert isinstance(result, Err)
        assert result.error.is_not_found

    def test_post_ignores_query_string(self) -> None:
        http = MockHttpClient()
        http.set_post("https://up/assets", {"ok": True})

        result = http.post_bytes("https://up/assets?name=a.zip", b"data", "application/zip")

        assert result == Ok({"ok": True})
        assert http.headers[0]["Content-Type"] == "application/zip"

    def test_download_writes_file(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download("https://dl/a.zip", b"abc")
        seen: list[tuple[int, int]] = []

        result = http.download(
            "https://dl/a.zip", tmp_path / "sub" / "a.zip", progress=lambda d, t: seen.append((d, t))
        )

        assert result == Ok(tmp_path / "sub" / "a.zip")
        assert (tmp_path / "sub" / "a.zip").read_bytes() == b"abc"
        assert seen == [(3, 3)]

    def test_configured_error(self) -> None:
        http = MockHttpClient()
        http.set_json("https://api", HttpError("https://api", 500, "boom"))

        result = http.get_json("https://api")

        assert isinstance(result, Err)
        assert result.error.status == 500


class TestUrllibErrorMapping:
    def _http_error(self, code: int, body: bytes) -> urllib.error.HTTPError:
        return urllib.error.HTTPError(
            "https://api", code, "Unprocessable", Message(), io.BytesIO(body)
        )

    def test_github_message_is_preferred(self) -> None:
        exc = self._http_error(422, b'{"message": "Validation Failed", "errors": []}')
        expected = HttpError("https://api", 422, "Validation Failed")
        assert _as_http_error("https://api", exc) == expected

    def test_non_json_body_falls_back_to_reason(self) -> None:
        exc = self._http_error(502, b"<html>bad gateway</html>")
        assert _as_http_error("https://api", exc).message == "Unprocessable"

    def test_network_errors_have_no_status(self) -> None:
        error = _as_http_error("https://api", urllib.error.URLError("Name or service not known"))
        assert error.status == 0
        assert error.message == "Name or service not known"
        assert _as_http_error("https://api", TimeoutError()).message == "Request timed out"
