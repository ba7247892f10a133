"""Configuration manager for schemaward.

Reads ``settings.conf`` (INI) layered over built-in defaults and converts the
raw strings into a typed :class:`~schemaward.types.GlobalConfig`.
"""

import configparser
import logging
from pathlib import Path

from schemaward.config.parser import (
    ConfigCommentManager,
    create_parser,
    split_list,
)
from schemaward.config.paths import Paths
from schemaward.constants import (
    CATALOG_URL,
    CONFIG_FILE_NAME,
    DEFAULT_CACHE_MAX_AGE_DAYS,
    DEFAULT_CATALOG_RETRY_COOLDOWN_SECONDS,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_EXTENSIONS,
    DEFAULT_LANGUAGE_IDS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_VALIDATOR_MODULE,
    GLOBAL_CONFIG_VERSION,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    KEY_VALIDATOR_MODULE,
    MAX_REDIRECTS,
    SECTION_CACHE,
    SECTION_DEFAULT,
    SECTION_DOCUMENTS,
    SECTION_NETWORK,
    USER_AGENT,
)
from schemaward.exceptions import ConfigurationError
from schemaward.types import (
    CacheConfig,
    DocumentsConfig,
    GlobalConfig,
    NetworkConfig,
)

# logging.getLogger rather than get_logger: the logger package imports this
# module lazily and must not recurse into root setup
logger = logging.getLogger(__name__)

RawConfigDict = dict[str, str | dict[str, str]]

_TRUE_VALUES = frozenset({"1", "yes", "true", "on"})
_FALSE_VALUES = frozenset({"0", "no", "false", "off"})


class ConfigManager:
    """Load and write the global INI configuration."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize config manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.CONFIG_DIR)

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_file = self.config_dir / CONFIG_FILE_NAME

    def get_default_global_config(self) -> RawConfigDict:
        """Get default global configuration values.

        Returns:
            Default configuration dictionary (string values, INI-shaped)

        """
        return {
            KEY_CONFIG_VERSION: GLOBAL_CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            KEY_VALIDATOR_MODULE: DEFAULT_VALIDATOR_MODULE,
            SECTION_NETWORK: {
                "catalog_url": CATALOG_URL,
                "user_agent": USER_AGENT,
                "timeout_seconds": str(DEFAULT_TIMEOUT_SECONDS),
                "max_redirects": str(MAX_REDIRECTS),
                "catalog_retry_cooldown_seconds": str(
                    DEFAULT_CATALOG_RETRY_COOLDOWN_SECONDS
                ),
            },
            SECTION_CACHE: {
                "directory": str(Paths.CACHE_DIR),
                "max_age_days": str(DEFAULT_CACHE_MAX_AGE_DAYS),
            },
            SECTION_DOCUMENTS: {
                "language_ids": ",".join(DEFAULT_LANGUAGE_IDS),
                "extensions": ",".join(DEFAULT_EXTENSIONS),
                "match_full_path": "true",
            },
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser populated with the defaults dictionary."""
        config = create_parser()

        flat_defaults = {
            key: value
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, subvalue)

        return config

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration from INI file.

        A missing file yields the defaults. Unparseable values fall back to
        the default for that key.

        Returns:
            Loaded global configuration

        """
        defaults = self.get_default_global_config()
        config = self._create_config_from_defaults(defaults)

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except configparser.Error as e:
                logger.warning(
                    "Ignoring unreadable config %s: %s", self.settings_file, e
                )
                config = self._create_config_from_defaults(defaults)

        return self._convert_to_global_config(config, defaults)

    def _get_int(
        self,
        config: configparser.ConfigParser,
        section: str,
        key: str,
        defaults: RawConfigDict,
    ) -> int:
        """Read an int setting, falling back to the default on bad input."""
        raw = config.get(section, key)
        try:
            value = int(raw)
        except ValueError:
            value = -1
        if value < 0:
            default = defaults[section][key]  # type: ignore[index]
            logger.warning(
                "Invalid value %r for %s.%s, using %s",
                raw,
                section,
                key,
                default,
            )
            return int(default)
        return value

    def _get_bool(
        self,
        config: configparser.ConfigParser,
        section: str,
        key: str,
        defaults: RawConfigDict,
    ) -> bool:
        """Read a bool setting, falling back to the default on bad input."""
        raw = config.get(section, key).strip().lower()
        if raw in _TRUE_VALUES:
            return True
        if raw in _FALSE_VALUES:
            return False
        default = defaults[section][key]  # type: ignore[index]
        logger.warning(
            "Invalid value %r for %s.%s, using %s", raw, section, key, default
        )
        return default in _TRUE_VALUES

    def _convert_to_global_config(
        self, config: configparser.ConfigParser, defaults: RawConfigDict
    ) -> GlobalConfig:
        """Convert the parsed INI into a typed GlobalConfig."""
        default_section = config[SECTION_DEFAULT]

        network = NetworkConfig(
            catalog_url=config.get(SECTION_NETWORK, "catalog_url"),
            user_agent=config.get(SECTION_NETWORK, "user_agent"),
            timeout_seconds=self._get_int(
                config, SECTION_NETWORK, "timeout_seconds", defaults
            ),
            max_redirects=self._get_int(
                config, SECTION_NETWORK, "max_redirects", defaults
            ),
            catalog_retry_cooldown_seconds=self._get_int(
                config,
                SECTION_NETWORK,
                "catalog_retry_cooldown_seconds",
                defaults,
            ),
        )
        cache = CacheConfig(
            directory=Paths.expand_path(
                config.get(SECTION_CACHE, "directory")
            ),
            max_age_days=self._get_int(
                config, SECTION_CACHE, "max_age_days", defaults
            ),
        )
        documents = DocumentsConfig(
            language_ids=split_list(
                config.get(SECTION_DOCUMENTS, "language_ids")
            ),
            extensions=split_list(config.get(SECTION_DOCUMENTS, "extensions")),
            match_full_path=self._get_bool(
                config, SECTION_DOCUMENTS, "match_full_path", defaults
            ),
        )

        return GlobalConfig(
            config_version=default_section.get(
                KEY_CONFIG_VERSION, GLOBAL_CONFIG_VERSION
            ),
            log_level=default_section.get(KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL),
            console_log_level=default_section.get(
                KEY_CONSOLE_LOG_LEVEL, DEFAULT_CONSOLE_LOG_LEVEL
            ),
            validator_module=default_section.get(
                KEY_VALIDATOR_MODULE, DEFAULT_VALIDATOR_MODULE
            ),
            network=network,
            cache=cache,
            documents=documents,
        )

    def save_default_config(self, *, overwrite: bool = False) -> Path:
        """Write a commented default settings.conf.

        Args:
            overwrite: Replace an existing file

        Returns:
            Path of the settings file

        Raises:
            ConfigurationError: If the file exists and overwrite is False,
                or if it cannot be written

        """
        if self.settings_file.exists() and not overwrite:
            msg = "settings file already exists"
            raise ConfigurationError(msg, target=str(self.settings_file))

        defaults = self.get_default_global_config()
        comments = ConfigCommentManager.get_section_comments()

        lines = [ConfigCommentManager.get_file_header()]
        lines.append(comments[SECTION_DEFAULT])
        lines.append(f"[{SECTION_DEFAULT}]\n")
        for key, value in defaults.items():
            if not isinstance(value, dict):
                lines.append(f"{key} = {value}\n")

        for section, values in defaults.items():
            if isinstance(values, dict):
                lines.append(comments.get(section, "\n"))
                lines.append(f"[{section}]\n")
                lines.extend(
                    f"{key} = {value}\n" for key, value in values.items()
                )

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.settings_file.write_text("".join(lines), encoding="utf-8")
        except OSError as e:
            msg = f"cannot write settings file: {e}"
            raise ConfigurationError(
                msg, target=str(self.settings_file)
            ) from e

        return self.settings_file
