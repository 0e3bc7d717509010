"""Process-wide logger state.

Records whether the root ``buildjl`` logger has been configured and which
handlers belong to it, so configuration can be applied exactly once and
undone by the test suite.
"""

import logging
import threading
from dataclasses import dataclass, field


@dataclass
class LoggerState:
    lock: threading.Lock = field(default_factory=threading.Lock)
    root_initialized: bool = False
    handlers: list[logging.Handler] = field(default_factory=list)

    def console_handlers(self) -> list[logging.Handler]:
        """Stream handlers that write to the terminal (not to a file)."""
        return [
            h
            for h in self.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def file_handlers(self) -> list[logging.Handler]:
        return [h for h in self.handlers if isinstance(h, logging.FileHandler)]

    def reset(self) -> None:
        """Close every handler and forget that setup happened."""
        for handler in self.handlers:
            handler.close()
        self.handlers = []
        self.root_initialized = False


_state = LoggerState()


def get_state() -> LoggerState:
    return _state
