"""Configuration management - settings and path utilities.

This package provides:
- ConfigManager: INI configuration loading and default-file generation
- Paths: Path constants and utilities
"""

from schemaward.config.config import ConfigManager
from schemaward.config.paths import Paths
from schemaward.types import GlobalConfig

__all__ = [
    "ConfigManager",
    "GlobalConfig",
    "Paths",
]
