"""Logging for buildjl.

    >>> from buildjl.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Repo name: %s", repo_name)

Handlers live only on the root ``buildjl`` logger. Use %-style arguments in
log calls, never f-strings, and never call logging.basicConfig().
"""

from typing import TYPE_CHECKING

from buildjl.logger.config import set_console_level as _set_console_level
from buildjl.logger.config import (
    update_logger_from_config as _update_config,
)
from buildjl.logger.formatters import ConsoleFormatter
from buildjl.logger.handlers import ConfigurationError
from buildjl.logger.logger import (
    clear_logger_state,
    get_logger,
    setup_logging,
)
from buildjl.logger.state import get_state

if TYPE_CHECKING:
    from buildjl.config import GlobalConfig

__all__ = [
    "ConfigurationError",
    "ConsoleFormatter",
    "clear_logger_state",
    "get_logger",
    "set_console_level",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config(config: "GlobalConfig") -> None:
    """Re-level the handlers from a loaded global configuration."""
    _update_config(get_state(), config)


def set_console_level(level: str) -> None:
    """Override the console log level for this run."""
    _set_console_level(get_state(), level)
