"""GitHub token lookup.

Tokens are read from the GITHUB_TOKEN environment variable first and then
from the system keyring (service ``buildjl``, user ``github_token``).
"""

import os
import re

import keyring
from keyring.errors import KeyringError

from buildjl.constants import (
    ENV_GITHUB_TOKEN,
    KEYRING_SERVICE,
    KEYRING_USERNAME,
)
from buildjl.logger import get_logger

logger = get_logger(__name__)

# GitHub token security constraints
MAX_TOKEN_LENGTH: int = 255  # Maximum allowed token length per GitHub docs

_PREFIXED_TOKEN_PATTERNS = (
    r"^ghp_[A-Za-z0-9_]{36,251}$",  # Personal Access Tokens
    r"^gho_[A-Za-z0-9_]{36,251}$",  # OAuth Access tokens
    r"^ghu_[A-Za-z0-9_]{36,251}$",  # GitHub App user-to-server tokens
    r"^ghs_[A-Za-z0-9_]{36,251}$",  # GitHub App server-to-server tokens
    r"^ghr_[A-Za-z0-9_]{36,251}$",  # GitHub App refresh tokens
    r"^github_pat_[A-Za-z0-9_]{36,243}$",  # Fine-grained PATs
)


def validate_github_token(token: str | None) -> bool:
    """Validate GitHub token format.

    Supports legacy 40-hex tokens and the prefixed formats (``ghp_``,
    ``gho_``, ``ghu_``, ``ghs_``, ``ghr_``, ``github_pat_``).

    Args:
        token: The token to validate

    Returns:
        True if the token format is valid, False otherwise

    """
    if not token or not isinstance(token, str):
        return False

    token = token.strip()
    if not token:
        return False

    if len(token) > MAX_TOKEN_LENGTH:
        logger.warning("Token exceeds maximum allowed length")
        return False

    if re.match(r"^[a-f0-9]{40}$", token):
        return True

    return any(re.match(pattern, token) for pattern in _PREFIXED_TOKEN_PATTERNS)


def _token_from_keyring() -> str | None:
    try:
        return keyring.get_password(KEYRING_SERVICE, KEYRING_USERNAME)
    except KeyringError as e:
        # Expected in headless environments without a keyring daemon
        logger.debug("Keyring unavailable: %s", e)
        return None


def _accept(token: str | None, source: str) -> str | None:
    if not token:
        return None
    token = token.strip()
    if validate_github_token(token):
        logger.debug("Using GitHub token from %s", source)
        return token
    logger.warning("Ignoring GitHub token from %s: invalid format", source)
    return None


def get_github_token() -> str | None:
    """Return a usable GitHub token, or None for anonymous access."""
    token = _accept(os.getenv(ENV_GITHUB_TOKEN), ENV_GITHUB_TOKEN)
    if token is None:
        token = _accept(_token_from_keyring(), "keyring")
    if token is None:
        logger.debug("No GitHub token found; using anonymous API access")
    return token


def get_auth_headers(token: str | None = None) -> dict[str, str]:
    """Return the Authorization header for ``token`` (looked up if omitted)."""
    token = token if token is not None else get_github_token()
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}
