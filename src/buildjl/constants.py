"""Centralized constants module for buildjl.

This module serves as the single source of truth for all shared constants
across the buildjl codebase. Constants are organized by logical categories
and use typing.Final annotations to ensure immutability.

Usage:
    from buildjl.constants import SCRIPT_EXTENSION
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

CONFIG_VERSION: Final[str] = "1.0.0"
CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = "buildjl"
DEFAULT_CONFIG_SUBDIR: Final[str] = ".config"

# Environment overrides (used by the test suite for isolation)
ENV_CONFIG_DIR: Final[str] = "BUILDJL_CONFIG_DIR"
ENV_LOG_DIR: Final[str] = "BUILDJL_LOG_DIR"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 30
DEFAULT_OUTPUT_DIR: Final[str] = "build"

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_GITHUB: Final[str] = "github"
SECTION_REGISTRY: Final[str] = "registry"
SECTION_NETWORK: Final[str] = "network"
SECTION_OUTPUT: Final[str] = "output"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_API_URL: Final[str] = "api_url"
KEY_DOWNLOAD_URL: Final[str] = "download_url"
KEY_ORG_PREFIX: Final[str] = "org_prefix"
KEY_REGISTRY_URL: Final[str] = "url"
KEY_REGISTRY_PATH: Final[str] = "path"
KEY_TIMEOUT_SECONDS: Final[str] = "timeout_seconds"
KEY_OUTPUT_DIRECTORY: Final[str] = "directory"

# =============================================================================
# GitHub / Registry Constants
# =============================================================================

GITHUB_API_URL: Final[str] = "https://api.github.com"
GITHUB_DOWNLOAD_URL: Final[str] = "https://github.com"
GITHUB_ACCEPT_HEADER: Final[str] = "application/vnd.github+json"
DEFAULT_ORG_PREFIX: Final[str] = "JuliaBinaryWrappers"
JLL_SUFFIX: Final[str] = "_jll"
JLL_REPO_SUFFIX: Final[str] = "_jll.jl"

GENERAL_REGISTRY_URL: Final[str] = (
    "https://raw.githubusercontent.com/JuliaRegistries/General/master"
)
REGISTRY_VERSIONS_FILE: Final[str] = "Versions.toml"

KEYRING_SERVICE: Final[str] = "buildjl"
KEYRING_USERNAME: Final[str] = "github_token"
ENV_GITHUB_TOKEN: Final[str] = "GITHUB_TOKEN"

HTTP_OK: Final[int] = 200
HTTP_FORBIDDEN: Final[int] = 403
HTTP_NOT_FOUND: Final[int] = 404

DOWNLOAD_CHUNK_SIZE: Final[int] = 65536

# =============================================================================
# Artifact Constants
# =============================================================================

SCRIPT_EXTENSION: Final[str] = ".jl"
BUILD_SCRIPT_PREFIX: Final[str] = "build"
HASH_ALGORITHM: Final[str] = "sha256"
BINARYPROVIDER_MIN_VERSION: Final[str] = "0.3.0"

# =============================================================================
# Logging Constants
# =============================================================================

# Maximum size for rotated log files (bytes)
LOG_MAX_FILE_SIZE_BYTES: Final[int] = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT: Final[int] = 3
LOG_FILE_NAME: Final[str] = "buildjl.log"

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Color mapping for console output levels
LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
