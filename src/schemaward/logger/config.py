"""Log settings: bootstrap defaults and settings.conf overrides.

Bootstrap levels come from constants so that importing the logger never
requires the config package; update_logger_from_config() applies the INI
levels once the config can be read.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from schemaward.constants import (
    APP_DIR_NAME,
    CONFIG_DIR_NAME,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_DIR_ENV_VAR,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from schemaward.logger.state import LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Return bootstrap (console_level, file_level, log_path).

    SCHEMAWARD_LOG_DIR, when set, replaces the log directory; the test
    suite uses it to stay out of the user's config directory.
    """
    env_log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if env_log_dir:
        log_dir = Path(env_log_dir).expanduser()
    else:
        log_dir = Path.home() / CONFIG_DIR_NAME / APP_DIR_NAME / "logs"

    log_path = log_dir / LOG_FILE_NAME
    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def update_logger_from_config(state: "LoggerState") -> None:
    """Apply settings.conf levels to the running handlers.

    Handlers are only re-levelled, never added or removed.

    Args:
        state: Logger state owning the queue listener

    """
    # Imported here: the config package logs, and must not be a hard
    # dependency of logger bootstrap
    from schemaward.config import ConfigManager  # noqa: PLC0415
    from schemaward.logger.handlers import level_of  # noqa: PLC0415

    config = ConfigManager().load_global_config()
    console_level = level_of(config["console_log_level"], logging.WARNING)
    file_level = level_of(config["log_level"], logging.INFO)

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.setLevel(file_level)
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(console_level)

    state.config_applied = True
