"""GitHub REST API access."""

from .client import API_URL, GitHubClient, GitHubRelease

__all__ = ["API_URL", "GitHubClient", "GitHubRelease"]
