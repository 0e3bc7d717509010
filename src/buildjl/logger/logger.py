"""Public logging entry points.

Every module does ``logger = get_logger(__name__)``. The first call
configures the root ``buildjl`` logger; later calls just return children,
which propagate to it.
"""

import logging
from pathlib import Path

from buildjl.logger.config import load_log_settings
from buildjl.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from buildjl.logger.state import get_state


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure the root logger once and return the logger ``name``.

    Arguments only take effect on the call that performs the setup.

    Args:
        name: Logger name, usually ``__name__``
        console_level: Console level (default ``INFO``)
        file_level: File level (default ``INFO``)
        log_file: Log file path (default ``~/.config/buildjl/logs/buildjl.log``)
        enable_file_logging: Whether to write a log file at all

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            default_console, default_file, default_path = load_log_settings()
            setup_root_logger(
                state,
                console_level or default_console,
                file_level or default_file,
                log_file or default_path,
                enable_file_logging,
            )
    return logging.getLogger(name)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    return setup_logging(name=name)


def clear_logger_state() -> None:
    """Detach all handlers so the next setup_logging() starts over (tests)."""
    state = get_state()
    with state.lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        state.reset()
