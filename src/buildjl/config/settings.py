"""Global configuration manager for INI settings."""

import configparser
from pathlib import Path
from typing import TypedDict

from buildjl.config.paths import Paths
from buildjl.constants import (
    CONFIG_VERSION,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_ORG_PREFIX,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_TIMEOUT_SECONDS,
    GENERAL_REGISTRY_URL,
    GITHUB_API_URL,
    GITHUB_DOWNLOAD_URL,
    KEY_API_URL,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_DOWNLOAD_URL,
    KEY_LOG_LEVEL,
    KEY_ORG_PREFIX,
    KEY_OUTPUT_DIRECTORY,
    KEY_REGISTRY_PATH,
    KEY_REGISTRY_URL,
    KEY_TIMEOUT_SECONDS,
    SECTION_DEFAULT,
    SECTION_GITHUB,
    SECTION_NETWORK,
    SECTION_OUTPUT,
    SECTION_REGISTRY,
)
from buildjl.logger import get_logger

logger = get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]


class GitHubConfig(TypedDict):
    """GitHub endpoints and naming."""

    api_url: str
    download_url: str
    org_prefix: str


class RegistryConfig(TypedDict):
    """Package registry location (HTTP base URL or local clone)."""

    url: str
    path: Path | None


class NetworkConfig(TypedDict):
    """Network configuration options."""

    timeout_seconds: int


class OutputConfig(TypedDict):
    """Where generated build.jl files are written."""

    directory: Path


class GlobalConfig(TypedDict):
    """Global application configuration."""

    config_version: str
    log_level: str
    console_log_level: str
    github: GitHubConfig
    registry: RegistryConfig
    network: NetworkConfig
    output: OutputConfig


class ConfigManager:
    """Manages the global INI configuration."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize config manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.config_dir())

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = Paths.settings_file(self.config_dir)

    @staticmethod
    def get_default_global_config() -> RawConfigDict:
        """Get default global configuration values."""
        return {
            KEY_CONFIG_VERSION: CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_GITHUB: {
                KEY_API_URL: GITHUB_API_URL,
                KEY_DOWNLOAD_URL: GITHUB_DOWNLOAD_URL,
                KEY_ORG_PREFIX: DEFAULT_ORG_PREFIX,
            },
            SECTION_REGISTRY: {
                KEY_REGISTRY_URL: GENERAL_REGISTRY_URL,
                KEY_REGISTRY_PATH: "",
            },
            SECTION_NETWORK: {
                KEY_TIMEOUT_SECONDS: str(DEFAULT_TIMEOUT_SECONDS),
            },
            SECTION_OUTPUT: {
                KEY_OUTPUT_DIRECTORY: DEFAULT_OUTPUT_DIR,
            },
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser from defaults dictionary."""
        config = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )

        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, str(subvalue))

        return config

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration from the INI file.

        A settings file populated with defaults is written on first use.

        Returns:
            Loaded global configuration

        """
        defaults = self.get_default_global_config()
        config = self._create_config_from_defaults(defaults)

        if self.settings_file.exists():
            logger.debug("Reading settings from %s", self.settings_file)
            config.read(self.settings_file, encoding="utf-8")
        else:
            self._write_config(config)

        return self._convert_to_global_config(config)

    def _write_config(self, config: configparser.ConfigParser) -> None:
        """Write ``config`` to settings.conf, creating the directory."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with self.settings_file.open("w", encoding="utf-8") as f:
                f.write("# buildjl settings\n")
                config.write(f)
        except OSError as e:
            # A read-only home must not prevent a run with default settings
            logger.warning(
                "Could not write default settings to %s: %s",
                self.settings_file,
                e,
            )
        else:
            logger.debug("Created default settings at %s", self.settings_file)

    def _convert_to_global_config(
        self, config: configparser.ConfigParser
    ) -> GlobalConfig:
        """Convert ConfigParser to typed configuration."""
        defaults = config[SECTION_DEFAULT]
        registry_path = config.get(SECTION_REGISTRY, KEY_REGISTRY_PATH).strip()
        output_dir = Path(
            config.get(SECTION_OUTPUT, KEY_OUTPUT_DIRECTORY)
        ).expanduser()

        try:
            timeout = config.getint(SECTION_NETWORK, KEY_TIMEOUT_SECONDS)
        except ValueError:
            logger.warning(
                "Invalid %s in [%s]; using %s",
                KEY_TIMEOUT_SECONDS,
                SECTION_NETWORK,
                DEFAULT_TIMEOUT_SECONDS,
            )
            timeout = DEFAULT_TIMEOUT_SECONDS

        return GlobalConfig(
            config_version=defaults.get(KEY_CONFIG_VERSION, CONFIG_VERSION),
            log_level=self._level(
                defaults.get(KEY_LOG_LEVEL), DEFAULT_LOG_LEVEL
            ),
            console_log_level=self._level(
                defaults.get(KEY_CONSOLE_LOG_LEVEL), DEFAULT_CONSOLE_LOG_LEVEL
            ),
            github=GitHubConfig(
                api_url=config.get(SECTION_GITHUB, KEY_API_URL).rstrip("/"),
                download_url=config.get(
                    SECTION_GITHUB, KEY_DOWNLOAD_URL
                ).rstrip("/"),
                org_prefix=config.get(SECTION_GITHUB, KEY_ORG_PREFIX),
            ),
            registry=RegistryConfig(
                url=config.get(SECTION_REGISTRY, KEY_REGISTRY_URL).rstrip("/"),
                path=Path(registry_path).expanduser() if registry_path else None,
            ),
            network=NetworkConfig(timeout_seconds=timeout),
            output=OutputConfig(directory=output_dir),
        )

    @staticmethod
    def _level(value: str | None, default: str) -> str:
        """Normalize a log level name, falling back to ``default``."""
        level = (value or default).strip().upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning("Invalid log level '%s'; using %s", value, default)
            return default
        return level
