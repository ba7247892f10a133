"""Centralized constants module for schemaward.

This module serves as the single source of truth for all shared constants
across the schemaward codebase. Constants are organized by logical categories
and use typing.Final annotations to ensure immutability.

Usage:
    from schemaward.constants import FRESHNESS_WINDOW_HOURS
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

GLOBAL_CONFIG_VERSION: Final[str] = "1.0.0"

CONFIG_FILE_NAME: Final[str] = "settings.conf"

# Config directory lives under ~/.config, cache under ~/.cache
CONFIG_DIR_NAME: Final[str] = ".config"
CACHE_DIR_NAME: Final[str] = ".cache"
APP_DIR_NAME: Final[str] = "schemaward"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_VALIDATOR_MODULE: Final[str] = "tomlkit_core"

ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_NETWORK: Final[str] = "network"
SECTION_CACHE: Final[str] = "cache"
SECTION_DOCUMENTS: Final[str] = "documents"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_VALIDATOR_MODULE: Final[str] = "validator_module"

# =============================================================================
# Network Constants
# =============================================================================

CATALOG_URL: Final[str] = "https://www.schemastore.org/api/json/catalog.json"
USER_AGENT: Final[str] = "schemaward (+https://www.schemastore.org)"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10
MAX_REDIRECTS: Final[int] = 5
DEFAULT_CATALOG_RETRY_COOLDOWN_SECONDS: Final[int] = 30

HTTP_OK_MIN: Final[int] = 200
HTTP_OK_MAX: Final[int] = 299
HTTP_REDIRECT_MIN: Final[int] = 300
HTTP_REDIRECT_MAX: Final[int] = 399

# =============================================================================
# Cache Constants
# =============================================================================

# Fixed for every entry; deliberately absent from settings.conf
FRESHNESS_WINDOW_HOURS: Final[int] = 24
CACHE_FILE_SUFFIX: Final[str] = ".json"
CACHE_TEMP_SUFFIX: Final[str] = ".tmp"
DEFAULT_CACHE_MAX_AGE_DAYS: Final[int] = 30

# =============================================================================
# Document Constants
# =============================================================================

DEFAULT_LANGUAGE_IDS: Final[tuple[str, ...]] = ("toml",)
DEFAULT_EXTENSIONS: Final[tuple[str, ...]] = (".toml",)

ROOT_ANCHOR: Final[str] = "root"
DEFAULT_SYNTAX_MESSAGE: Final[str] = "Syntax error"
SCHEMA_MESSAGE_TEMPLATE: Final[str] = "Schema Error: {message} (at {path})"

# Function names exported by the compiled validator module
NATIVE_SYNTAX_FUNCTION: Final[str] = "validate_toml"
NATIVE_SCHEMA_FUNCTION: Final[str] = "validate_with_schema"

# =============================================================================
# Logging Constants
# =============================================================================

LOG_ROOT_NAME: Final[str] = "schemaward"
LOG_FILE_NAME: Final[str] = "schemaward.log"
LOG_DIR_ENV_VAR: Final[str] = "SCHEMAWARD_LOG_DIR"

LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT: Final[int] = 3

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
