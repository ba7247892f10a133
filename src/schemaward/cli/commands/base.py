"""Base command handler for schemaward CLI commands."""

from abc import ABC, abstractmethod
from argparse import Namespace
from pathlib import Path

from schemaward.config import ConfigManager
from schemaward.core.orchestrator import TextDocument


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    Concrete handlers implement execute() and return the process exit
    status.
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        """Initialize the command handler with shared dependencies.

        Args:
            config_manager: Configuration management instance

        """
        self.config_manager = config_manager
        self.global_config = config_manager.load_global_config()

    @abstractmethod
    async def execute(self, args: Namespace) -> int:
        """Execute the command with the given arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            Process exit status

        """

    @staticmethod
    def _load_document(file: str) -> TextDocument:
        """Read file into a TextDocument.

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not valid UTF-8

        """
        path = Path(file).expanduser().resolve()
        return TextDocument(
            uri=path.as_uri(),
            file_name=str(path),
            text=path.read_text(encoding="utf-8"),
        )
