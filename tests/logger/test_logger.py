"""Tests for logger setup."""

import logging
import os
from logging.handlers import QueueHandler, RotatingFileHandler
from pathlib import Path

from schemaward.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
)
from schemaward.logger.state import get_state


def test_root_logger_has_single_queue_handler():
    """Test repeated get_logger calls do not stack handlers."""
    get_logger("schemaward.test.a")
    get_logger("schemaward.test.b")

    root = logging.getLogger("schemaward")
    assert get_state().root_initialized
    assert sum(isinstance(h, QueueHandler) for h in root.handlers) == 1


def test_child_loggers_have_no_handlers():
    """Test module loggers only propagate to the root."""
    logger = get_logger("schemaward.test.child")

    assert logger.handlers == []
    assert logger.propagate is True


def test_listener_has_console_and_file_handlers():
    """Test the queue listener feeds a console and a rotating file handler."""
    get_logger("schemaward.test.handlers")

    handlers = get_state().queue_listener.handlers
    assert any(isinstance(h, RotatingFileHandler) for h in handlers)
    assert any(
        type(h) is logging.StreamHandler for h in handlers
    )


def test_records_reach_log_file():
    """Test records are written to the file under SCHEMAWARD_LOG_DIR."""
    logger = get_logger("schemaward.test.file")
    logger.warning("schema cache unwritable")

    flush_all_handlers()

    log_file = Path(os.environ["SCHEMAWARD_LOG_DIR"]) / "schemaward.log"
    assert "schema cache unwritable" in log_file.read_text(encoding="utf-8")


def test_clear_logger_state_allows_reinitialization():
    """Test the root logger can be rebuilt after clearing."""
    module_logger = get_logger("schemaward.test.reinit")

    clear_logger_state()
    assert not get_state().root_initialized
    assert logging.getLogger("schemaward").handlers == []

    get_logger("schemaward.test.reinit")
    root = logging.getLogger("schemaward")
    assert get_state().root_initialized
    assert sum(isinstance(h, QueueHandler) for h in root.handlers) == 1
    assert logging.getLogger("schemaward.test.reinit") is module_logger
