"""CLI argument parser for schemaward.

Handles parsing of command-line arguments and provides a clean
interface for defining CLI commands and their options.
"""

import argparse
from argparse import Namespace

from schemaward.types import GlobalConfig


class CLIParser:
    """Command-line argument parser for schemaward."""

    def __init__(self, global_config: GlobalConfig) -> None:
        """Initialize the CLI parser with global configuration.

        Args:
            global_config: Loaded global configuration, used for defaults
                shown in help texts.

        """
        self.global_config = global_config

    def parse_args(self, argv: list[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse (sys.argv[1:] when None)

        Returns:
            Parsed arguments namespace.

        """
        parser = self.build_parser()
        return parser.parse_args(argv)

    def build_parser(self) -> argparse.ArgumentParser:
        """Create the main parser with all subcommands."""
        parser = argparse.ArgumentParser(
            prog="schemaward",
            description="Schema-aware validation for structured config files",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Which schema applies to a file?
  %(prog)s lookup Cargo.toml

  # Validate a file and print its diagnostics
  %(prog)s check pyproject.toml

  # Inspect or maintain the schema cache
  %(prog)s cache stats
  %(prog)s cache prune --days 7
            """,
        )
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show schemaward version and exit",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )
        self._add_lookup_command(subparsers)
        self._add_check_command(subparsers)
        self._add_cache_command(subparsers)
        self._add_config_command(subparsers)
        return parser

    def _add_lookup_command(self, subparsers) -> None:
        """Add lookup command parser."""
        lookup_parser = subparsers.add_parser(
            "lookup", help="Show the catalog schema matched for a file"
        )
        lookup_parser.add_argument("file", help="Path of the config file")
        lookup_parser.add_argument(
            "--root",
            help="Project root used for anchored catalog patterns",
        )

    def _add_check_command(self, subparsers) -> None:
        """Add check command parser."""
        check_parser = subparsers.add_parser(
            "check", help="Validate a file and print its diagnostics"
        )
        check_parser.add_argument("file", help="Path of the config file")
        check_parser.add_argument(
            "--validator",
            default=self.global_config["validator_module"],
            help="Import name of the native validator module "
            "(default: %(default)s)",
        )
        check_parser.add_argument(
            "--root",
            help="Project root used for anchored catalog patterns",
        )

    def _add_cache_command(self, subparsers) -> None:
        """Add cache command parser."""
        cache_parser = subparsers.add_parser(
            "cache", help="Inspect and maintain the schema cache"
        )
        cache_parser.add_argument(
            "action",
            choices=["stats", "list", "clear", "prune"],
            help="Cache operation",
        )
        cache_parser.add_argument(
            "--days",
            type=int,
            default=self.global_config["cache"]["max_age_days"],
            help="Maximum entry age kept by 'prune' (default: %(default)s)",
        )

    def _add_config_command(self, subparsers) -> None:
        """Add config command parser."""
        config_parser = subparsers.add_parser(
            "config", help="Show or initialize settings.conf"
        )
        group = config_parser.add_mutually_exclusive_group(required=True)
        group.add_argument(
            "--show", action="store_true", help="Print the effective config"
        )
        group.add_argument(
            "--init",
            action="store_true",
            help="Write a commented default settings.conf",
        )
        config_parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite an existing settings.conf with --init",
        )
