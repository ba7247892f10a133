"""INI parser helpers for schemaward configuration.

Provides the parser factory used for reading settings.conf and the comment
blocks written into a freshly generated file.
"""

import configparser
from datetime import UTC, datetime

from schemaward.constants import (
    GLOBAL_CONFIG_VERSION,
    ISO_DATETIME_FORMAT,
    SECTION_CACHE,
    SECTION_DEFAULT,
    SECTION_DOCUMENTS,
    SECTION_NETWORK,
)


def create_parser() -> configparser.ConfigParser:
    """Create a ConfigParser that understands inline comments.

    Returns:
        ConfigParser without interpolation, accepting ``#`` and ``;``
        inline comments

    """
    return configparser.ConfigParser(
        inline_comment_prefixes=("#", ";"),
        interpolation=None,
    )


def split_list(value: str) -> tuple[str, ...]:
    """Split a comma-separated setting into stripped, non-empty items."""
    return tuple(item.strip() for item in value.split(",") if item.strip())


class ConfigCommentManager:
    """Comment blocks written into a generated settings.conf."""

    @staticmethod
    def get_file_header() -> str:
        """Return the banner written at the top of settings.conf."""
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)
        return f"""# schemaward configuration
# Controls where schemas are fetched from, how they are cached and which
# documents are validated.
#
# Generated: {timestamp} (format {GLOBAL_CONFIG_VERSION})

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Return the comment block preceding each section, by name."""
        return {
            SECTION_DEFAULT: """# config_version: Format version of this file; do not change
# log_level: Level written to the log file (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Level printed to the terminal
# validator_module: Python import name of the native validator module

""",
            SECTION_NETWORK: """
# catalog_url: Schema catalog listing fileMatch globs and schema URLs
# user_agent: User-Agent header sent with every request
# timeout_seconds: Seconds before a request is abandoned
# max_redirects: Redirect hops followed before giving up
# catalog_retry_cooldown_seconds: Wait after a failed catalog fetch (0 = none)

""",
            SECTION_CACHE: """
# directory: Where downloaded schemas are stored
# max_age_days: Entries older than this are removed by 'cache prune'

""",
            SECTION_DOCUMENTS: """
# language_ids: Comma-separated editor language ids to validate
# extensions: Comma-separated file extensions to validate
# match_full_path: Honor directory parts of catalog globs (true/false)

""",
        }
