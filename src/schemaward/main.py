"""Main CLI entry point for schemaward.

Delegates all functionality to the CLI runner and its command handlers.
"""

import sys

import uvloop

from schemaward.cli import CLIRunner
from schemaward.logger import get_logger

logger = get_logger(__name__)


async def async_main() -> int:
    """Run the CLI asynchronously and return its exit status."""
    logger.debug("CLI started")
    runner = CLIRunner()
    return await runner.run()


def main() -> None:
    """Run the CLI application on a uvloop event loop."""
    try:
        exit_code = uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("CLI cancelled by user")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
