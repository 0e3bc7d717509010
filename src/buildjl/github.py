"""GitHub release API client.

Lists the assets of a tagged release and downloads them. All calls are
synchronous and go through one requests.Session.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests

from buildjl import __version__
from buildjl.auth import get_auth_headers
from buildjl.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    DOWNLOAD_CHUNK_SIZE,
    GITHUB_ACCEPT_HEADER,
    GITHUB_API_URL,
    GITHUB_DOWNLOAD_URL,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_OK,
)
from buildjl.exceptions import ReleaseFetchError
from buildjl.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReleaseAsset:
    """A file attached to a GitHub release."""

    name: str
    browser_download_url: str

    @classmethod
    def from_github_asset(cls, asset: dict[str, Any]) -> "ReleaseAsset":
        """Create a ReleaseAsset from a GitHub API asset dictionary."""
        return cls(
            name=asset["name"],
            browser_download_url=asset["browser_download_url"],
        )


@dataclass(frozen=True)
class Release:
    """A GitHub release and its assets."""

    tag_name: str
    assets: list[ReleaseAsset] = field(default_factory=list)

    @classmethod
    def from_release_data(cls, data: dict[str, Any], tag_name: str) -> "Release":
        return cls(
            tag_name=data.get("tag_name", tag_name),
            assets=[ReleaseAsset.from_github_asset(a) for a in data.get("assets", [])],
        )


def release_download_url(
    repo_name: str, tag_name: str, base_url: str = GITHUB_DOWNLOAD_URL
) -> str:
    """URL prefix under which a release's assets are served."""
    return f"{base_url}/{repo_name}/releases/download/{tag_name}"


class GitHubClient:
    """Handles communication with the GitHub REST API."""

    def __init__(
        self,
        api_url: str = GITHUB_API_URL,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        token: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: Base URL of the GitHub REST API
            timeout: Per-request timeout in seconds
            token: GitHub token; looked up from env/keyring when omitted
            session: Optional pre-built session (used by tests)

        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": GITHUB_ACCEPT_HEADER,
                "User-Agent": f"buildjl/{__version__}",
            }
        )
        self.session.headers.update(get_auth_headers(token))

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _raise_for_status(response: requests.Response, what: str) -> None:
        if response.status_code == HTTP_OK:
            return
        if (
            response.status_code == HTTP_FORBIDDEN
            and "rate limit" in response.text.lower()
        ):
            raise ReleaseFetchError(
                "GitHub API rate limit exceeded; set GITHUB_TOKEN and retry",
                target=what,
            )
        if response.status_code == HTTP_NOT_FOUND:
            raise ReleaseFetchError("not found (404)", target=what)
        raise ReleaseFetchError(
            f"HTTP {response.status_code}: {response.text[:200]}", target=what
        )

    def get_release(self, repo_name: str, tag_name: str) -> Release:
        """Fetch the release tagged ``tag_name`` in ``repo_name``.

        Args:
            repo_name: ``owner/repo``
            tag_name: Release tag

        Returns:
            The release with its assets

        Raises:
            ReleaseFetchError: On network errors or non-200 responses

        """
        url = (
            f"{self.api_url}/repos/{repo_name}/releases/tags/"
            f"{quote(tag_name, safe='')}"
        )
        what = f"{repo_name}@{tag_name}"
        logger.debug("Fetching release from %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise ReleaseFetchError(str(e), target=what) from e

        self._raise_for_status(response, what)
        release = Release.from_release_data(response.json(), tag_name)
        logger.debug("Release %s has %d assets", what, len(release.assets))
        return release

    def download(self, url: str, dest: Path) -> Path:
        """Stream ``url`` to ``dest``.

        Raises:
            ReleaseFetchError: On network errors or non-200 responses

        """
        logger.debug("Downloading %s", url)
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                self._raise_for_status(response, dest.name)
                dest.parent.mkdir(parents=True, exist_ok=True)
                with dest.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise ReleaseFetchError(str(e), target=dest.name) from e

        logger.debug("Downloaded %s (%d bytes)", dest.name, dest.stat().st_size)
        return dest
