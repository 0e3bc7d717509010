"""Configuration management for buildjl."""

from buildjl.config.paths import Paths
from buildjl.config.settings import (
    ConfigManager,
    GitHubConfig,
    GlobalConfig,
    NetworkConfig,
    OutputConfig,
    RegistryConfig,
)

__all__ = [
    "ConfigManager",
    "GitHubConfig",
    "GlobalConfig",
    "NetworkConfig",
    "OutputConfig",
    "Paths",
    "RegistryConfig",
]
