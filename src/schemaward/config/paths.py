"""Filesystem locations used by schemaward.

Settings and logs live under ``~/.config/schemaward``; downloaded schemas
are disposable and live under ``~/.cache/schemaward``.
"""

from pathlib import Path

from schemaward.constants import (
    APP_DIR_NAME,
    CACHE_DIR_NAME,
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
)


class Paths:
    """Default locations, resolved against the user's home directory."""

    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / CONFIG_DIR_NAME / APP_DIR_NAME
    LOGS_DIR = CONFIG_DIR / "logs"
    GLOBAL_CONFIG_FILE = CONFIG_DIR / CONFIG_FILE_NAME
    CACHE_DIR = HOME_DIR / CACHE_DIR_NAME / APP_DIR_NAME / "schemas"

    @staticmethod
    def expand_path(value: str) -> Path:
        """Turn a path setting into an absolute Path.

        ``~`` is expanded and relative paths are resolved against the
        current directory. The path does not need to exist.

        Example:
            >>> Paths.expand_path("~/schemas")
            PosixPath('/home/user/schemas')

        """
        return Path(value).expanduser().resolve()
