"""Public logging API: setup_logging, get_logger and test helpers."""

import atexit
import contextlib
import logging
import time
from pathlib import Path

from schemaward.constants import LOG_ROOT_NAME
from schemaward.logger.config import load_log_settings
from schemaward.logger.handlers import (
    build_console_handler,
    build_file_handler,
    install_root_handlers,
)
from schemaward.logger.state import get_state

_FLUSH_TIMEOUT_SECONDS = 5.0
_FLUSH_POLL_SECONDS = 0.01


def flush_all_handlers() -> None:
    """Block until queued records are written and handlers flushed."""
    state = get_state()
    if state.queue_listener is None or state.log_queue is None:
        return

    deadline = time.monotonic() + _FLUSH_TIMEOUT_SECONDS
    while not state.log_queue.empty() and time.monotonic() < deadline:
        time.sleep(_FLUSH_POLL_SECONDS)
    # The listener may still be holding the last dequeued record
    time.sleep(_FLUSH_POLL_SECONDS * 10)

    for handler in state.queue_listener.handlers:
        with contextlib.suppress(OSError, ValueError):
            handler.flush()


@atexit.register
def _shutdown() -> None:
    """Drain and stop the listener when the interpreter exits."""
    flush_all_handlers()
    get_state().stop_listener()


def setup_logging(
    name: str = LOG_ROOT_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Return logger name, configuring the root logger on first use.

    Only the first call in a process installs handlers; the level and file
    arguments are ignored afterwards.

    Args:
        name: Logger name, normally __name__
        console_level: Console level (default WARNING)
        file_level: File level (default INFO)
        log_file: Log file path (default from load_log_settings())
        enable_file_logging: Also write to the rotating log file

    Returns:
        Logger instance

    Raises:
        ConfigurationError: If the log file cannot be opened

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            default_console, default_file, default_path = load_log_settings()
            handlers: list[logging.Handler] = [
                build_console_handler(console_level or default_console)
            ]
            if enable_file_logging:
                handlers.append(
                    build_file_handler(
                        log_file or default_path, file_level or default_file
                    )
                )
            install_root_handlers(state, handlers)

    return logging.getLogger(name)


def get_logger(
    name: str = LOG_ROOT_NAME,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Get a module logger.

    Example:
        >>> logger = get_logger(__name__)

    """
    return setup_logging(name=name, enable_file_logging=enable_file_logging)


def clear_logger_state() -> None:
    """Tear down root handlers so the next get_logger() starts over.

    Intended for tests. Module-level loggers obtained earlier keep working
    because only handlers are removed, never the logger objects.
    """
    state = get_state()
    with state.lock:
        flush_all_handlers()
        state.stop_listener()
        root = logging.getLogger(LOG_ROOT_NAME)
        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)
        state.root_initialized = False
        state.config_applied = False
