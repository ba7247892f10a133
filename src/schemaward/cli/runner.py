"""CLI runner for schemaward.

Routes parsed arguments to the matching command handler.
"""

import sys
from argparse import Namespace

from schemaward import __version__
from schemaward.cli.commands import (
    BaseCommandHandler,
    CacheHandler,
    CheckHandler,
    ConfigHandler,
    LookupHandler,
)
from schemaward.cli.parser import CLIParser
from schemaward.config import ConfigManager
from schemaward.logger import get_logger, update_logger_from_config

logger = get_logger(__name__)


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(self, config_manager: ConfigManager | None = None) -> None:
        """Initialize CLI runner with shared dependencies.

        Args:
            config_manager: Configuration manager (default location if None)

        """
        self.config_manager = config_manager or ConfigManager()
        self.global_config = self.config_manager.load_global_config()
        update_logger_from_config()

        self.command_handlers: dict[str, BaseCommandHandler] = {
            "lookup": LookupHandler(self.config_manager),
            "check": CheckHandler(self.config_manager),
            "cache": CacheHandler(self.config_manager),
            "config": ConfigHandler(self.config_manager),
        }

    async def run(self, argv: list[str] | None = None) -> int:
        """Run the CLI application.

        Args:
            argv: Arguments to parse (sys.argv[1:] when None)

        Returns:
            Process exit status

        """
        args = CLIParser(self.global_config).parse_args(argv)

        if args.version:
            print(__version__)
            return 0

        if not args.command:
            print("❌ No command specified. Use --help.", file=sys.stderr)
            return 1

        try:
            return await self._execute_command(args)
        except KeyboardInterrupt:
            print("\n⏹️  Operation cancelled by user", file=sys.stderr)
            return 1
        except Exception as e:
            logger.exception("Unexpected error running %s", args.command)
            print(f"❌ Unexpected error: {e}", file=sys.stderr)
            return 1

    async def _execute_command(self, args: Namespace) -> int:
        """Execute the command with the appropriate handler."""
        handler = self.command_handlers[args.command]
        return await handler.execute(args)
