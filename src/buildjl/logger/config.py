"""Log settings: bootstrap defaults and levels from settings.conf.

Loggers are usable as soon as a module is imported, with the built-in
defaults. Once the CLI has loaded settings.conf, update_logger_from_config()
re-levels the existing handlers; it never adds or removes any.
"""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from buildjl.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_DIR,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from buildjl.config import GlobalConfig
    from buildjl.logger.state import LoggerState


def default_log_dir() -> Path:
    """``$BUILDJL_LOG_DIR`` if set, else ``~/.config/buildjl/logs``."""
    env_log_dir = os.getenv(ENV_LOG_DIR)
    if env_log_dir:
        return Path(env_log_dir).expanduser()
    return Path.home() / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME / "logs"


def load_log_settings() -> tuple[str, str, Path]:
    """Return (console_level, file_level, log_path) used before config loads."""
    return (
        DEFAULT_CONSOLE_LOG_LEVEL,
        DEFAULT_LOG_LEVEL,
        default_log_dir() / LOG_FILE_NAME,
    )


def update_logger_from_config(
    state: "LoggerState", config: "GlobalConfig"
) -> None:
    """Apply ``log_level`` and ``console_log_level`` from settings.conf."""
    file_level = getattr(logging, config["log_level"], logging.INFO)
    console_level = getattr(logging, config["console_log_level"], logging.INFO)

    for handler in state.file_handlers():
        handler.setLevel(file_level)
    for handler in state.console_handlers():
        handler.setLevel(console_level)


def set_console_level(state: "LoggerState", level: str) -> None:
    """Override the console level for this run (``--verbose``/``--quiet``)."""
    for handler in state.console_handlers():
        handler.setLevel(getattr(logging, level.upper(), logging.INFO))
