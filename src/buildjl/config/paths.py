"""Path constants and utilities for buildjl configuration."""

import os
from pathlib import Path

from buildjl.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
    ENV_CONFIG_DIR,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    CONFIG_BASE_DIR = HOME_DIR / DEFAULT_CONFIG_SUBDIR
    CONFIG_DIR = CONFIG_BASE_DIR / CONFIG_DIR_NAME

    @classmethod
    def config_dir(cls) -> Path:
        """Return the configuration directory, honouring BUILDJL_CONFIG_DIR."""
        env_dir = os.getenv(ENV_CONFIG_DIR)
        if env_dir:
            return Path(env_dir).expanduser()
        return cls.CONFIG_DIR

    @classmethod
    def settings_file(cls, config_dir: Path | None = None) -> Path:
        """Return the path of settings.conf inside ``config_dir``."""
        return (config_dir or cls.config_dir()) / CONFIG_FILE_NAME
