"""Catalog glob matching.

Catalog ``fileMatch`` patterns use ``*`` (any run of characters) and ``?``
(exactly one character); every other character is literal. Patterns without
a slash are tested against the file's base name. Patterns with a slash are
directory-qualified: with full-path matching on, ``*`` and ``?`` stop at
``/``, ``**`` crosses directories, and the pattern must line up with a
directory boundary (or with the project root, when it starts with ``/``).
"""

import re
from functools import lru_cache
from pathlib import PurePosixPath

from schemaward.core.catalog import Catalog
from schemaward.logger import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1024)
def compile_basename_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob matched against a whole base name."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


@lru_cache(maxsize=1024)
def compile_path_glob(pattern: str) -> re.Pattern[str]:
    """Compile a directory-qualified glob matched against a path suffix.

    A leading ``/`` anchors the pattern at the start of the (root-relative)
    path; otherwise it may start at any directory boundary.
    """
    anchored = pattern.startswith("/")
    body = pattern.lstrip("/")

    parts = []
    i = 0
    while i < len(body):
        if body.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif body.startswith("**", i):
            parts.append(".*")
            i += 2
        elif body[i] == "*":
            parts.append("[^/]*")
            i += 1
        elif body[i] == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(body[i]))
            i += 1

    prefix = "^" if anchored else "(?:^|/)"
    return re.compile(prefix + "".join(parts) + "$", re.DOTALL)


def _normalize(file_name: str) -> PurePosixPath:
    """Return file_name as a POSIX path (backslashes become slashes)."""
    return PurePosixPath(file_name.replace("\\", "/"))


class SchemaMatcher:
    """Select the schema URL whose catalog globs match a file."""

    def __init__(
        self, match_full_path: bool = True  # noqa: FBT001, FBT002
    ) -> None:
        """Initialize the matcher.

        Args:
            match_full_path: Honor directory-qualified patterns. When False,
                every pattern is tested against the base name only.

        """
        self.match_full_path = match_full_path

    def matches(
        self, pattern: str, file_name: str, root: str | None = None
    ) -> bool:
        """Return True when pattern selects file_name.

        Args:
            pattern: Catalog glob pattern
            file_name: File path or bare base name
            root: Optional project root for ``/``-anchored patterns

        """
        path = _normalize(file_name)

        if "/" not in pattern or not self.match_full_path:
            regex = compile_basename_glob(pattern)
            return regex.fullmatch(path.name) is not None

        if root is not None:
            try:
                path = path.relative_to(_normalize(root))
            except ValueError:
                pass
        elif pattern.startswith("/"):
            # No project root to anchor against
            return False

        return compile_path_glob(pattern).search(path.as_posix()) is not None

    def match(
        self, catalog: Catalog, file_name: str, root: str | None = None
    ) -> str | None:
        """Return the schema URL for file_name, or None.

        Entries are tried in catalog order; the first entry with any
        matching pattern wins.

        Args:
            catalog: Loaded schema catalog
            file_name: File path or bare base name
            root: Optional project root for ``/``-anchored patterns

        Returns:
            Schema URL of the first matching entry, or None

        """
        for entry in catalog.entries:
            for pattern in entry.file_match:
                if self.matches(pattern, file_name, root):
                    logger.debug(
                        "%s matched %r -> %s",
                        file_name,
                        pattern,
                        entry.schema_url,
                    )
                    return entry.schema_url

        logger.debug("No catalog entry matches %s", file_name)
        return None
