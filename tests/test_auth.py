"""Tests for GitHub token lookup."""

from unittest.mock import patch

import pytest
from keyring.errors import KeyringError

from buildjl.auth import (
    MAX_TOKEN_LENGTH,
    get_auth_headers,
    get_github_token,
    validate_github_token,
)

PAT = "ghp_" + "A1b2" * 9
LEGACY = "0123456789abcdef0123456789abcdef01234567"


class TestValidateGithubToken:
    """Test token format validation."""

    @pytest.mark.parametrize(
        "token",
        [
            PAT,
            LEGACY,
            "gho_" + "x" * 36,
            "ghs_" + "x" * 40,
            "github_pat_" + "y" * 50,
        ],
    )
    def test_valid(self, token):
        assert validate_github_token(token)

    @pytest.mark.parametrize(
        "token",
        [None, "", "   ", "ghp_short", "not a token", LEGACY.upper()],
    )
    def test_invalid(self, token):
        assert not validate_github_token(token)

    def test_too_long(self):
        assert not validate_github_token("ghp_" + "a" * MAX_TOKEN_LENGTH)


class TestGetGithubToken:
    """Test token lookup order."""

    def test_environment_first(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", f"  {PAT}\n")
        with patch("buildjl.auth.keyring.get_password") as get_password:
            assert get_github_token() == PAT
        get_password.assert_not_called()

    def test_keyring_fallback(self):
        with patch(
            "buildjl.auth.keyring.get_password", return_value=LEGACY
        ) as get_password:
            assert get_github_token() == LEGACY
        get_password.assert_called_once_with("buildjl", "github_token")

    def test_invalid_env_token_falls_through_to_keyring(self, monkeypatch, caplog):
        monkeypatch.setenv("GITHUB_TOKEN", "garbage")
        with patch("buildjl.auth.keyring.get_password", return_value=LEGACY):
            assert get_github_token() == LEGACY
        assert "invalid format" in caplog.text

    def test_keyring_unavailable(self):
        with patch(
            "buildjl.auth.keyring.get_password",
            side_effect=KeyringError("no backend"),
        ):
            assert get_github_token() is None

    def test_no_token(self):
        assert get_github_token() is None


class TestGetAuthHeaders:
    """Test Authorization header construction."""

    def test_explicit_token(self):
        assert get_auth_headers("abc") == {"Authorization": "Bearer abc"}

    def test_looked_up_token(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", PAT)
        assert get_auth_headers() == {"Authorization": f"Bearer {PAT}"}

    def test_anonymous(self):
        assert get_auth_headers() == {}
