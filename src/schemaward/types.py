"""Centralized type definitions for schemaward.

This module contains the TypedDict definitions for the loaded configuration
so the config layer and its consumers agree on one shape.
"""

from pathlib import Path
from typing import TypedDict


class NetworkConfig(TypedDict):
    """Network configuration options."""

    catalog_url: str
    user_agent: str
    timeout_seconds: int
    max_redirects: int
    catalog_retry_cooldown_seconds: int


class CacheConfig(TypedDict):
    """Schema cache configuration options."""

    directory: Path
    max_age_days: int


class DocumentsConfig(TypedDict):
    """Which documents the orchestrator recognizes."""

    language_ids: tuple[str, ...]
    extensions: tuple[str, ...]
    match_full_path: bool


class GlobalConfig(TypedDict):
    """Global application configuration."""

    config_version: str
    log_level: str
    console_log_level: str
    validator_module: str
    network: NetworkConfig
    cache: CacheConfig
    documents: DocumentsConfig
