"""Top-level package for schemaward.

Resolves, caches and applies JSON Schemas for structured-config documents
and turns validator output into positioned diagnostics.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("schemaward")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
