"""Console formatting for schemaward log records.

INFO records are user-facing progress lines and print as the bare message.
Everything else prints with time, logger name and an ANSI-coloured level.
"""

import copy
import logging

from schemaward.constants import LOG_COLORS


class HybridConsoleFormatter(logging.Formatter):
    """Plain messages for INFO, structured and coloured lines otherwise.

    Example Output:
        Downloading schema from https://json.schemastore.org/cargo.json
        12:30:45 - schemaward.core.fetch - WARNING - Network request failed

    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        use_color: bool = True,  # noqa: FBT001, FBT002
    ) -> None:
        """Initialize the formatter.

        Args:
            fmt: Format string for non-INFO records
            datefmt: Date format for the timestamp
            use_color: Colour level names with ANSI escapes

        """
        super().__init__(fmt, datefmt)
        self.use_color = use_color

    def _colorize(self, record: logging.LogRecord) -> logging.LogRecord:
        """Return a copy of record with a coloured level name."""
        color = LOG_COLORS.get(record.levelname)
        if not self.use_color or color is None:
            return record
        colored = copy.copy(record)
        colored.levelname = f"{color}{record.levelname}{LOG_COLORS['RESET']}"
        return colored

    def format(self, record: logging.LogRecord) -> str:
        """Format record according to its level."""
        if record.levelno == logging.INFO:
            return record.getMessage()
        return super().format(self._colorize(record))
