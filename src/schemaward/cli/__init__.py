"""Command-line interface for schemaward."""

from schemaward.cli.runner import CLIRunner

__all__ = ["CLIRunner"]
