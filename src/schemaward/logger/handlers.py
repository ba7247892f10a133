"""Console and file handlers behind the root logger's queue.

Handlers are never attached to loggers directly: the root ``schemaward``
logger carries a single QueueHandler, and a QueueListener thread hands
records to the handlers built here. Code on the event loop therefore never
blocks on terminal or disk writes.
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from schemaward.constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_DATE_FORMAT,
    LOG_CONSOLE_FORMAT,
    LOG_FILE_DATE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_ROOT_NAME,
    LOG_ROTATION_THRESHOLD_BYTES,
)
from schemaward.exceptions import ConfigurationError
from schemaward.logger.formatters import HybridConsoleFormatter
from schemaward.logger.state import LoggerState


def level_of(name: str, default: int) -> int:
    """Return the numeric level for name ("DEBUG", "INFO", ...)."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def build_console_handler(level: str) -> logging.StreamHandler:
    """Build the stderr handler (colour only on a terminal)."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        HybridConsoleFormatter(
            LOG_CONSOLE_FORMAT,
            datefmt=LOG_CONSOLE_DATE_FORMAT,
            use_color=sys.stderr.isatty(),
        )
    )
    handler.setLevel(level_of(level, logging.WARNING))
    return handler


def build_file_handler(log_file: Path, level: str) -> RotatingFileHandler:
    """Build the rotating log file handler.

    Raises:
        ConfigurationError: If the log directory or file cannot be opened

    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_ROTATION_THRESHOLD_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        msg = f"cannot open log file: {e}"
        raise ConfigurationError(msg, target=str(log_file)) from e

    handler.setFormatter(
        logging.Formatter(LOG_FILE_FORMAT, datefmt=LOG_FILE_DATE_FORMAT)
    )
    handler.setLevel(level_of(level, logging.INFO))
    return handler


def install_root_handlers(
    state: LoggerState, handlers: list[logging.Handler]
) -> None:
    """Route the root logger through a queue to handlers.

    Any handler previously attached to the root logger is closed first.
    """
    root = logging.getLogger(LOG_ROOT_NAME)
    # Everything reaches the queue; the real handlers filter by level
    root.setLevel(logging.DEBUG)
    root.propagate = False
    for old in list(root.handlers):
        old.close()
        root.removeHandler(old)

    state.log_queue = queue.Queue(-1)
    state.queue_listener = QueueListener(
        state.log_queue, *handlers, respect_handler_level=True
    )
    state.queue_listener.start()
    root.addHandler(QueueHandler(state.log_queue))
    state.root_initialized = True
