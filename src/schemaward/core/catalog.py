"""Schema catalog model and client.

The catalog maps fileMatch glob patterns to schema URLs. It is fetched once
per client lifetime; a failed fetch is not memoized, but further attempts
are held off for a cooldown period so editor events cannot turn a flaky
network into a request storm.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from schemaward.constants import (
    CATALOG_URL,
    DEFAULT_CATALOG_RETRY_COOLDOWN_SECONDS,
)
from schemaward.core.fetch import JsonFetcher
from schemaward.exceptions import (
    CatalogParseError,
    CatalogUnavailable,
    ParseError,
    SchemawardError,
)
from schemaward.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class CatalogEntry:
    """One catalog entry.

    Attributes:
        schema_url: URL of the JSON Schema
        file_match: Glob patterns selecting files, in catalog order
        name: Human-readable schema name (may be empty)

    """

    schema_url: str
    file_match: tuple[str, ...]
    name: str = ""

    @classmethod
    def from_api_response(cls, entry: dict[str, Any]) -> CatalogEntry | None:
        """Create CatalogEntry from one element of the ``schemas`` array.

        Args:
            entry: Raw catalog entry

        Returns:
            CatalogEntry, or None when the entry has no usable URL

        """
        url = entry.get("url")
        if not isinstance(url, str) or not url:
            return None

        patterns = entry.get("fileMatch") or []
        if not isinstance(patterns, list):
            return None

        name = entry.get("name", "")
        return cls(
            schema_url=url,
            file_match=tuple(p for p in patterns if isinstance(p, str)),
            name=name if isinstance(name, str) else "",
        )


@dataclass(slots=True, frozen=True)
class Catalog:
    """Ordered, immutable sequence of catalog entries."""

    entries: tuple[CatalogEntry, ...]

    def __len__(self) -> int:
        """Return the number of entries."""
        return len(self.entries)

    @classmethod
    def from_api_response(cls, data: Any) -> Catalog:  # noqa: ANN401
        """Build a Catalog from the decoded catalog document.

        Args:
            data: Decoded JSON of the form ``{"schemas": [...]}``

        Returns:
            Parsed catalog (malformed entries are skipped)

        Raises:
            CatalogParseError: If the document has no ``schemas`` array

        """
        if not isinstance(data, dict) or not isinstance(
            data.get("schemas"), list
        ):
            msg = "expected an object with a 'schemas' array"
            raise CatalogParseError(msg)

        entries = []
        for raw in data["schemas"]:
            entry = (
                CatalogEntry.from_api_response(raw)
                if isinstance(raw, dict)
                else None
            )
            if entry is not None:
                entries.append(entry)

        return cls(entries=tuple(entries))


class CatalogClient:
    """Fetch and memoize the schema catalog.

    Usage:
        client = CatalogClient(fetcher)
        catalog = await client.get_catalog()

    """

    def __init__(
        self,
        fetcher: JsonFetcher,
        catalog_url: str = CATALOG_URL,
        retry_cooldown: float = DEFAULT_CATALOG_RETRY_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the catalog client.

        Args:
            fetcher: HTTP fetcher shared with schema downloads
            catalog_url: URL of the catalog document
            retry_cooldown: Seconds to fail fast after a failed fetch
                (0 retries on every call)
            clock: Monotonic time source

        """
        self.fetcher = fetcher
        self.catalog_url = catalog_url
        self.retry_cooldown = retry_cooldown
        self._clock = clock
        self._catalog: Catalog | None = None
        self._failed_at: float | None = None

    @property
    def catalog(self) -> Catalog | None:
        """Return the memoized catalog, if one was fetched."""
        return self._catalog

    async def get_catalog(self) -> Catalog:
        """Return the catalog, fetching it on first use.

        Returns:
            The memoized catalog

        Raises:
            CatalogUnavailable: A previous fetch failed within the cooldown
            CatalogParseError: The catalog body is malformed
            NetworkError: The catalog could not be downloaded

        """
        if self._catalog is not None:
            return self._catalog

        if self._failed_at is not None:
            elapsed = self._clock() - self._failed_at
            if elapsed < self.retry_cooldown:
                msg = (
                    "previous fetch failed, retrying in "
                    f"{self.retry_cooldown - elapsed:.0f}s"
                )
                raise CatalogUnavailable(msg, target=self.catalog_url)

        try:
            data = await self.fetcher.fetch_json(self.catalog_url)
            catalog = Catalog.from_api_response(data)
        except ParseError as e:
            self._failed_at = self._clock()
            raise CatalogParseError(e.message, target=self.catalog_url) from e
        except SchemawardError:
            self._failed_at = self._clock()
            raise

        # Concurrent first fetches may both land here; they store equal data
        self._catalog = catalog
        self._failed_at = None
        logger.info("Schema catalog fetched: %d entries", len(catalog))
        return catalog

    def reset(self) -> None:
        """Forget the memoized catalog and any failure cooldown."""
        self._catalog = None
        self._failed_at = None
