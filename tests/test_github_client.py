"""Tests for the GitHub release client."""

from unittest.mock import MagicMock

import pytest
import requests

from buildjl.exceptions import ReleaseFetchError
from buildjl.github import (
    GitHubClient,
    Release,
    ReleaseAsset,
    release_download_url,
)

RELEASE_JSON = {
    "tag_name": "LLVM-v11.0.1+3",
    "assets": [
        {
            "name": "LLVM.v11.0.1.x86_64-linux-gnu.tar.gz",
            "browser_download_url": "https://example.com/LLVM.v11.0.1.x86_64-linux-gnu.tar.gz",
            "size": 1234,
        },
        {
            "name": "LLVM.v11.0.1.x86_64-apple-darwin14.tar.gz",
            "browser_download_url": "https://example.com/LLVM.v11.0.1.x86_64-apple-darwin14.tar.gz",
        },
    ],
}


def response(status_code: int = 200, json_data=None, text: str = "", chunks=()):
    mock = MagicMock()
    mock.status_code = status_code
    mock.text = text
    mock.json.return_value = json_data
    mock.iter_content.return_value = iter(chunks)
    mock.__enter__.return_value = mock
    mock.__exit__.return_value = False
    return mock


@pytest.fixture
def session():
    mock = MagicMock()
    mock.headers = {}
    return mock


class TestReleaseModels:
    """Test Release and ReleaseAsset construction."""

    def test_from_release_data(self):
        release = Release.from_release_data(RELEASE_JSON, "ignored")
        assert release.tag_name == "LLVM-v11.0.1+3"
        assert release.assets[0] == ReleaseAsset(
            name="LLVM.v11.0.1.x86_64-linux-gnu.tar.gz",
            browser_download_url="https://example.com/LLVM.v11.0.1.x86_64-linux-gnu.tar.gz",
        )

    def test_missing_fields_fall_back(self):
        release = Release.from_release_data({}, "v1")
        assert release.tag_name == "v1"
        assert release.assets == []

    def test_release_download_url(self):
        assert release_download_url("Org/X_jll.jl", "X-v1.0.0") == (
            "https://github.com/Org/X_jll.jl/releases/download/X-v1.0.0"
        )


class TestGitHubClient:
    """Test GitHubClient requests and error mapping."""

    def test_headers_with_token(self, session):
        GitHubClient(token="ghp_" + "a" * 36, session=session)
        assert session.headers["Authorization"] == "Bearer ghp_" + "a" * 36
        assert session.headers["Accept"] == "application/vnd.github+json"
        assert session.headers["User-Agent"].startswith("buildjl/")

    def test_anonymous(self, session):
        GitHubClient(session=session)
        assert "Authorization" not in session.headers

    def test_get_release(self, session):
        session.get.return_value = response(json_data=RELEASE_JSON)
        client = GitHubClient(api_url="https://api.example.com/", timeout=7, session=session)

        release = client.get_release("Org/LLVM_jll.jl", "LLVM-v11.0.1+3")

        session.get.assert_called_once_with(
            "https://api.example.com/repos/Org/LLVM_jll.jl/releases/tags/LLVM-v11.0.1%2B3",
            timeout=7,
        )
        assert len(release.assets) == 2

    def test_not_found(self, session):
        session.get.return_value = response(404, text="Not Found")
        with pytest.raises(ReleaseFetchError, match="404") as exc_info:
            GitHubClient(session=session).get_release("Org/X", "v1")
        assert exc_info.value.target == "Org/X@v1"

    def test_rate_limited(self, session):
        session.get.return_value = response(
            403, text="API rate limit exceeded for 1.2.3.4"
        )
        with pytest.raises(ReleaseFetchError, match="rate limit"):
            GitHubClient(session=session).get_release("Org/X", "v1")

    def test_other_status(self, session):
        session.get.return_value = response(502, text="Bad Gateway")
        with pytest.raises(ReleaseFetchError, match="HTTP 502"):
            GitHubClient(session=session).get_release("Org/X", "v1")

    def test_network_error(self, session):
        session.get.side_effect = requests.Timeout("timed out")
        with pytest.raises(ReleaseFetchError, match="timed out"):
            GitHubClient(session=session).get_release("Org/X", "v1")

    def test_download(self, session, tmp_path):
        session.get.return_value = response(chunks=[b"abc", b"", b"def"])
        dest = tmp_path / "sub" / "file.tar.gz"

        result = GitHubClient(session=session).download("https://example.com/f", dest)

        assert result == dest
        assert dest.read_bytes() == b"abcdef"
        assert session.get.call_args.kwargs["stream"] is True

    def test_download_failure(self, session, tmp_path):
        session.get.return_value = response(404)
        with pytest.raises(ReleaseFetchError, match="file.tar.gz"):
            GitHubClient(session=session).download(
                "https://example.com/f", tmp_path / "file.tar.gz"
            )

    def test_download_network_error(self, session, tmp_path):
        session.get.side_effect = requests.ConnectionError("reset")
        with pytest.raises(ReleaseFetchError):
            GitHubClient(session=session).download(
                "https://example.com/f", tmp_path / "file.tar.gz"
            )

    def test_context_manager_closes_session(self, session):
        with GitHubClient(session=session):
            pass
        session.close.assert_called_once()
