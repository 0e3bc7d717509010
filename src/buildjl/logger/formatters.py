"""Console formatting for buildjl log output.

INFO records print as the bare message, so a normal run reads as a short
report ("Tag name: LLVM-v11.0.1+0"). Every other level uses the structured
format, with the level name coloured when the console is a terminal::

    12:30:45 - buildjl.tarball - WARNING - Could not extract the platform ...
"""

import logging

from buildjl.constants import LOG_COLORS


class ConsoleFormatter(logging.Formatter):
    """Plain INFO messages, structured (optionally coloured) otherwise."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        use_color: bool = True,  # noqa: FBT001, FBT002
    ) -> None:
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        if not self.use_color or record.levelname not in LOG_COLORS:
            return super().format(record)

        # Other handlers share the record; put the plain level name back.
        levelname = record.levelname
        record.levelname = f"{LOG_COLORS[levelname]}{levelname}{LOG_COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname
