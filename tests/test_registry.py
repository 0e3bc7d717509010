"""Tests for registry version lookup."""

from unittest.mock import MagicMock

import pytest
import requests

from buildjl.exceptions import VersionResolutionError
from buildjl.registry import RegistryClient, parse_versions, registry_relpath

VERSIONS_TOML = """\
["9.0.1+0"]
git-tree-sha1 = "aaaa"

["11.0.1+3"]
git-tree-sha1 = "bbbb"

["11.0.1+10"]
git-tree-sha1 = "cccc"

["10.0.1+0"]
git-tree-sha1 = "dddd"
"""


def response(status_code: int, text: str = "") -> MagicMock:
    mock = MagicMock()
    mock.status_code = status_code
    mock.text = text
    return mock


class TestParseVersions:
    """Test parse_versions()."""

    def test_sorted_by_version_not_text(self):
        assert parse_versions(VERSIONS_TOML) == [
            "9.0.1+0",
            "10.0.1+0",
            "11.0.1+3",
            "11.0.1+10",
        ]

    def test_invalid_keys_are_skipped(self):
        text = '["1.0.0"]\nx = 1\n\n["not-a-version"]\nx = 2\n'
        assert parse_versions(text) == ["1.0.0"]

    @pytest.mark.parametrize(
        ("keys", "expected"),
        [
            (
                ["1.0.0", "1.0.0-alpha.beta", "1.0.0-alpha"],
                ["1.0.0-alpha", "1.0.0-alpha.beta", "1.0.0"],
            ),
            (["1.0.0-x.7.z.92", "0.9.0"], ["0.9.0", "1.0.0-x.7.z.92"]),
            (["0.7.0-beta2.22+1", "0.7.0-beta2.3"], ["0.7.0-beta2.3", "0.7.0-beta2.22+1"]),
        ],
    )
    def test_semver_prerelease_keys(self, keys, expected):
        text = "".join(f'["{key}"]\nx = 1\n\n' for key in keys)
        assert parse_versions(text) == expected

    def test_invalid_toml(self):
        with pytest.raises(VersionResolutionError, match="invalid TOML"):
            parse_versions("[[[", source="LLVM_jll")

    def test_relpath(self):
        assert registry_relpath("LLVM_jll") == "L/LLVM_jll"
        assert registry_relpath("libpng_jll") == "L/libpng_jll"


class TestRegistryClientLocal:
    """Test lookups against a local registry clone."""

    def test_latest_version(self, tmp_path):
        package_dir = tmp_path / "L" / "LLVM_jll"
        package_dir.mkdir(parents=True)
        (package_dir / "Versions.toml").write_text(VERSIONS_TOML, encoding="utf-8")

        client = RegistryClient(path=tmp_path, session=MagicMock())

        assert client.latest_version("LLVM_jll") == "11.0.1+10"
        client.session.get.assert_not_called()

    def test_unregistered(self, tmp_path):
        client = RegistryClient(path=tmp_path, session=MagicMock())
        assert client.versions("Nope_jll") == []
        assert client.latest_version("Nope_jll") is None


class TestRegistryClientHTTP:
    """Test lookups over HTTP."""

    def test_latest_version(self):
        session = MagicMock()
        session.get.return_value = response(200, VERSIONS_TOML)
        client = RegistryClient(url="https://example.com/General/", session=session, timeout=5)

        assert client.latest_version("LLVM_jll") == "11.0.1+10"
        session.get.assert_called_once_with(
            "https://example.com/General/L/LLVM_jll/Versions.toml", timeout=5
        )

    def test_not_found(self):
        session = MagicMock()
        session.get.return_value = response(404)
        client = RegistryClient(session=session)
        assert client.latest_version("Nope_jll") is None

    def test_server_error(self):
        session = MagicMock()
        session.get.return_value = response(500)
        client = RegistryClient(session=session)
        with pytest.raises(VersionResolutionError, match="HTTP 500"):
            client.latest_version("LLVM_jll")

    def test_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("offline")
        client = RegistryClient(session=session)
        with pytest.raises(VersionResolutionError) as exc_info:
            client.versions("LLVM_jll")
        assert exc_info.value.target == "LLVM_jll"
