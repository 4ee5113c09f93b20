"""Downloading and unpacking the Godot toolchain."""

from .download import Downloader, DownloadResult
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .installer import Installer, InstallError, InstallResult

__all__ = [
    "Downloader",
    "DownloadResult",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "Installer",
    "InstallError",
    "InstallResult",
]
