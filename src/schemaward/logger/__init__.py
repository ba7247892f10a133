"""Logging for schemaward.

Architecture:
    module loggers → "schemaward" root → QueueHandler → Queue
                                                          ↓
                                   QueueListener thread → console + file

Usage:
    >>> from schemaward.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Downloading schema from %s", url)

Rules:
    1. Obtain loggers with get_logger(__name__)
    2. Never call logging.basicConfig() or attach handlers to child loggers
    3. Use %-formatting in log calls, not f-strings

Environment Variables:
    SCHEMAWARD_LOG_DIR: Redirect the log file (used by the test suite).
"""

from schemaward.logger.config import (
    update_logger_from_config as _update_config,
)
from schemaward.logger.formatters import HybridConsoleFormatter
from schemaward.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
)
from schemaward.logger.state import get_state

__all__ = [
    "HybridConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config() -> None:
    """Apply settings.conf log levels to the running handlers."""
    _update_config(get_state())
