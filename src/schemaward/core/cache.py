"""Persistent on-disk cache for downloaded JSON Schemas.

One file per schema URL, named after a reversible hex encoding of the URL.
Keys longer than one file name segment are split into fixed-length
directory levels, so every URL has a usable path. The file's modification
time is the fetch time: entries younger than the freshness window are
served without network access, older ones are kept as a fallback for when
a refresh fails.

Writes go to a uniquely named temporary file in the cache directory and are
renamed into place, so concurrent readers (tasks or other processes) never
see a truncated schema.
"""

import asyncio
import contextlib
import os
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

from schemaward.constants import (
    CACHE_FILE_SUFFIX,
    CACHE_TEMP_SUFFIX,
    FRESHNESS_WINDOW_HOURS,
)
from schemaward.exceptions import CacheIOError
from schemaward.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Temp files older than this were left behind by an interrupted write
ORPHAN_TEMP_MAX_AGE_SECONDS = 3600

# Longest key segment used as a single path component (NAME_MAX is 255)
KEY_SEGMENT_LENGTH = 200


def encode_key(url: str) -> str:
    """Return the cache key for url (lowercase hex of its UTF-8 bytes)."""
    return url.encode("utf-8").hex()


def decode_key(key: str) -> str:
    """Return the URL a cache key was derived from.

    Raises:
        ValueError: If key is not a valid encoded URL

    """
    return bytes.fromhex(key).decode("utf-8")


def split_key(key: str) -> list[str]:
    """Split key into path segments of at most KEY_SEGMENT_LENGTH chars.

    Every segment but the last becomes a directory level; short keys yield
    a single segment.
    """
    return [
        key[start : start + KEY_SEGMENT_LENGTH]
        for start in range(0, len(key), KEY_SEGMENT_LENGTH)
    ] or [key]


@dataclass(slots=True, frozen=True)
class CachedSchema:
    """Metadata about one cached schema file.

    Attributes:
        key: Cache key (hex of the URL, joined across segment levels)
        url: Schema URL decoded from the key
        path: Location of the cache file
        size: File size in bytes
        fetched_at: Modification time of the file
        fresh: Whether the entry is inside the freshness window

    """

    key: str
    url: str
    path: Path
    size: int
    fetched_at: datetime
    fresh: bool


class SchemaCache:
    """Freshness-bounded schema cache with stale-read fallback.

    Usage:
        cache = SchemaCache(Path("~/.cache/schemaward/schemas").expanduser())
        content = await cache.get(url)
        if content is None:
            content = await download(url)
            await cache.put(url, content)

    """

    def __init__(
        self,
        cache_dir: Path,
        ttl_hours: int = FRESHNESS_WINDOW_HOURS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the schema cache.

        The directory is created lazily on first write.

        Args:
            cache_dir: Directory holding one file per schema
            ttl_hours: Freshness window in hours
            clock: Wall-clock time source comparable to file mtimes

        """
        self.cache_dir = cache_dir
        self.ttl_hours = ttl_hours
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        """Return the freshness window in seconds."""
        return self.ttl_hours * SECONDS_PER_HOUR

    def _get_cache_file_path(self, url: str) -> Path:
        """Return the cache file path for url."""
        *dirs, name = split_key(encode_key(url))
        return self.cache_dir.joinpath(*dirs, f"{name}{CACHE_FILE_SUFFIX}")

    def _key_of(self, cache_file: Path) -> str:
        """Rebuild the cache key from a cache file path.

        Raises:
            ValueError: If the path is not laid out like a cache entry

        """
        *dirs, name = cache_file.relative_to(self.cache_dir).parts
        if any(len(part) != KEY_SEGMENT_LENGTH for part in dirs):
            msg = "not inside key segment directories"
            raise ValueError(msg)
        return "".join(dirs) + name.removesuffix(CACHE_FILE_SUFFIX)

    def _ensure_directory(self) -> None:
        """Create the cache directory if it does not exist yet."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    async def _run(func: Callable[..., T], *args: Any) -> T:  # noqa: ANN401
        """Run blocking file I/O in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    def _read(self, url: str, *, fresh_only: bool) -> str | None:
        """Read the cache file for url (blocking)."""
        cache_file = self._get_cache_file_path(url)
        try:
            mtime = cache_file.stat().st_mtime
            if fresh_only and self._clock() - mtime >= self.ttl_seconds:
                logger.debug("Cache stale for %s", url)
                return None
            # Bytes, not read_text: newlines must come back untranslated
            content = cache_file.read_bytes().decode("utf-8")
        except FileNotFoundError:
            logger.debug("No cache file for %s", url)
            return None
        except (OSError, UnicodeDecodeError) as e:
            msg = f"cannot read {cache_file.name}: {e}"
            raise CacheIOError(msg, target=url) from e

        logger.debug("Cache hit for %s", url)
        return content

    async def get(self, url: str) -> str | None:
        """Return cached content for url if it is still fresh.

        Args:
            url: Schema URL

        Returns:
            Cached schema text, or None when absent or stale

        Raises:
            CacheIOError: If the cache file exists but cannot be read

        """
        return await self._run(lambda: self._read(url, fresh_only=True))

    async def get_stale(self, url: str) -> str | None:
        """Return cached content for url regardless of its age.

        Raises:
            CacheIOError: If the cache file exists but cannot be read

        """
        return await self._run(lambda: self._read(url, fresh_only=False))

    def is_fresh(self, url: str) -> bool:
        """Return True when url has a cache entry inside the window."""
        try:
            mtime = self._get_cache_file_path(url).stat().st_mtime
        except OSError:
            return False
        return self._clock() - mtime < self.ttl_seconds

    def _write(self, url: str, content: str) -> None:
        """Atomically write content for url (blocking)."""
        cache_file = self._get_cache_file_path(url)
        temp_path: str | None = None
        try:
            self._ensure_directory()
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                prefix=".", suffix=CACHE_TEMP_SUFFIX, dir=self.cache_dir
            )
            with os.fdopen(fd, "wb") as temp_file:
                temp_file.write(content.encode("utf-8"))
            os.replace(temp_path, cache_file)
        except OSError as e:
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    Path(temp_path).unlink()
            msg = f"cannot write {cache_file.name}: {e}"
            raise CacheIOError(msg, target=url) from e

        logger.debug("Cached schema for %s", url)

    async def put(self, url: str, content: str) -> None:
        """Store content for url, replacing any previous entry.

        Args:
            url: Schema URL
            content: Raw schema text, stored verbatim

        Raises:
            CacheIOError: If the entry cannot be written

        """
        await self._run(self._write, url, content)

    def _scan(self) -> list[CachedSchema]:
        """List cache entries (blocking)."""
        if not self.cache_dir.is_dir():
            return []

        now = self._clock()
        entries = []
        for cache_file in self.cache_dir.rglob(f"*{CACHE_FILE_SUFFIX}"):
            try:
                key = self._key_of(cache_file)
                url = decode_key(key)
                stat = cache_file.stat()
            except (ValueError, OSError) as e:
                logger.warning(
                    "Skipping unrecognized cache file %s: %s",
                    cache_file.name,
                    e,
                )
                continue
            entries.append(
                CachedSchema(
                    key=key,
                    url=url,
                    path=cache_file,
                    size=stat.st_size,
                    fetched_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                    fresh=now - stat.st_mtime < self.ttl_seconds,
                )
            )
        return sorted(entries, key=lambda entry: entry.key)

    async def entries(self) -> list[CachedSchema]:
        """Return metadata for every cached schema, sorted by key."""
        return await self._run(self._scan)

    async def get_cache_stats(self) -> dict[str, int | str]:
        """Get cache statistics.

        Returns:
            Dictionary with entry counts, total size and cache location

        """
        entries = await self.entries()
        fresh_count = sum(1 for entry in entries if entry.fresh)
        return {
            "total_entries": len(entries),
            "fresh_entries": fresh_count,
            "stale_entries": len(entries) - fresh_count,
            "total_bytes": sum(entry.size for entry in entries),
            "cache_directory": str(self.cache_dir),
            "ttl_hours": self.ttl_hours,
        }

    def _remove(self, predicate: Callable[[Path, float], bool]) -> int:
        """Delete cache and temp files selected by predicate (blocking)."""
        if not self.cache_dir.is_dir():
            return 0

        now = self._clock()
        removed = 0
        for cache_file in list(self.cache_dir.rglob("*")):
            if cache_file.suffix not in (CACHE_FILE_SUFFIX, CACHE_TEMP_SUFFIX):
                continue
            *dirs, _name = cache_file.relative_to(self.cache_dir).parts
            if any(len(part) != KEY_SEGMENT_LENGTH for part in dirs):
                continue
            try:
                age = now - cache_file.stat().st_mtime
                if predicate(cache_file, age):
                    cache_file.unlink()
                    removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                msg = f"cannot remove {cache_file.name}: {e}"
                raise CacheIOError(msg, target=str(self.cache_dir)) from e

        self._remove_empty_segment_dirs()
        return removed

    def _remove_empty_segment_dirs(self) -> None:
        """Delete key segment directories left empty, deepest first."""
        segment_dirs = [
            path
            for path in self.cache_dir.rglob("*")
            if path.is_dir() and len(path.name) == KEY_SEGMENT_LENGTH
        ]
        for path in sorted(segment_dirs, key=lambda p: -len(p.parts)):
            # Non-empty directories still hold live entries
            with contextlib.suppress(OSError):
                path.rmdir()

    async def clear(self) -> int:
        """Remove every cached schema.

        Returns:
            Number of files removed

        """
        removed = await self._run(self._remove, lambda _path, _age: True)
        logger.info("Cleared %d cache entries", removed)
        return removed

    async def prune(self, max_age_days: int) -> int:
        """Remove schemas older than max_age_days and orphaned temp files.

        Args:
            max_age_days: Maximum entry age in days

        Returns:
            Number of files removed

        """
        max_age = max_age_days * SECONDS_PER_DAY

        def expired(path: Path, age: float) -> bool:
            if path.suffix == CACHE_TEMP_SUFFIX:
                return age > ORPHAN_TEMP_MAX_AGE_SECONDS
            return age > max_age

        removed = await self._run(self._remove, expired)
        if removed:
            logger.info("Pruned %d old cache entries", removed)
        return removed
