"""Command handlers for the schemaward CLI."""

from schemaward.cli.commands.base import BaseCommandHandler
from schemaward.cli.commands.cache import CacheHandler
from schemaward.cli.commands.check import CheckHandler
from schemaward.cli.commands.config import ConfigHandler
from schemaward.cli.commands.lookup import LookupHandler

__all__ = [
    "BaseCommandHandler",
    "CacheHandler",
    "CheckHandler",
    "ConfigHandler",
    "LookupHandler",
]
