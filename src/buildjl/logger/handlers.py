"""Handlers of the root ``buildjl`` logger.

One stdout console handler and, unless disabled, one size-rotated log file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

from buildjl.constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_DATE_FORMAT,
    LOG_CONSOLE_FORMAT,
    LOG_FILE_DATE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_MAX_FILE_SIZE_BYTES,
)
from buildjl.logger.formatters import ConsoleFormatter
from buildjl.logger.state import LoggerState

ROOT_LOGGER_NAME = "buildjl"


class ConfigurationError(Exception):
    """Error in logging configuration."""


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _create_console_handler(
    console_level: str, stream: TextIO | None = None
) -> logging.StreamHandler:
    """Console handler on stdout; colour only when stdout is a terminal."""
    stream = stream or sys.stdout
    handler = logging.StreamHandler(stream)
    is_tty = getattr(stream, "isatty", lambda: False)()
    handler.setFormatter(
        ConsoleFormatter(
            LOG_CONSOLE_FORMAT,
            datefmt=LOG_CONSOLE_DATE_FORMAT,
            use_color=is_tty,
        )
    )
    handler.setLevel(_level(console_level))
    return handler


def _create_file_handler(log_file: Path, file_level: str) -> RotatingFileHandler:
    """Rotating file handler writing to ``log_file``.

    Raises:
        ConfigurationError: If the log directory or file cannot be created

    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=LOG_MAX_FILE_SIZE_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        msg = f"Failed to setup file logging: {e}"
        raise ConfigurationError(msg) from e

    handler.setFormatter(
        logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_FILE_DATE_FORMAT)
    )
    handler.setLevel(_level(file_level))
    return handler


def setup_root_logger(
    state: LoggerState,
    console_level: str,
    file_level: str,
    log_file: Path,
    enable_file_logging: bool,  # noqa: FBT001
) -> None:
    """Attach fresh handlers to the root ``buildjl`` logger.

    The logger itself passes everything (DEBUG); filtering happens per
    handler so the file can keep more detail than the console.

    A log file that cannot be created is reported on the console and
    skipped; logging never stops the program from starting.

    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    root_logger.propagate = False

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    handlers: list[logging.Handler] = [_create_console_handler(console_level)]
    file_error: ConfigurationError | None = None
    if enable_file_logging:
        try:
            handlers.append(_create_file_handler(log_file, file_level))
        except ConfigurationError as e:
            file_error = e

    for handler in handlers:
        root_logger.addHandler(handler)

    state.handlers = handlers
    state.root_initialized = True

    if file_error is not None:
        root_logger.warning("%s; continuing without a log file", file_error)
