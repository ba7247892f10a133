"""Filename → schema text resolution.

Composes the catalog client, the glob matcher and the on-disk cache. Every
schema-subsystem failure is absorbed here: callers only ever learn whether a
schema is available.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson

from schemaward.core.cache import SchemaCache
from schemaward.core.catalog import CatalogClient
from schemaward.core.fetch import JsonFetcher
from schemaward.core.matcher import SchemaMatcher
from schemaward.core.singleflight import SingleFlight
from schemaward.exceptions import CacheIOError, ParseError, SchemawardError
from schemaward.logger import get_logger

if TYPE_CHECKING:
    import aiohttp

    from schemaward.types import GlobalConfig

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class ResolvedSchema:
    """A schema selected for a file.

    Attributes:
        url: Schema URL from the matching catalog entry
        content: Raw schema text
        stale: True when served from an expired cache entry after a failed
            refresh

    """

    url: str
    content: str
    stale: bool = False


class SchemaResolver:
    """Resolve the JSON Schema text that applies to a file."""

    def __init__(
        self,
        catalog_client: CatalogClient,
        matcher: SchemaMatcher,
        cache: SchemaCache,
        fetcher: JsonFetcher,
    ) -> None:
        """Initialize the resolver.

        Args:
            catalog_client: Source of the schema catalog
            matcher: Glob matcher selecting a catalog entry
            cache: On-disk schema cache
            fetcher: HTTP fetcher for schema downloads

        """
        self.catalog_client = catalog_client
        self.matcher = matcher
        self.cache = cache
        self.fetcher = fetcher
        self._flight: SingleFlight[ResolvedSchema | None] = SingleFlight()

    @classmethod
    def from_config(
        cls, session: aiohttp.ClientSession, config: GlobalConfig
    ) -> SchemaResolver:
        """Build a resolver and its collaborators from global config.

        Args:
            session: HTTP session shared by catalog and schema downloads
            config: Loaded global configuration

        Returns:
            Fully wired SchemaResolver

        """
        network_cfg = config["network"]
        fetcher = JsonFetcher.from_config(session, network_cfg)
        return cls(
            catalog_client=CatalogClient(
                fetcher,
                catalog_url=network_cfg["catalog_url"],
                retry_cooldown=network_cfg["catalog_retry_cooldown_seconds"],
            ),
            matcher=SchemaMatcher(config["documents"]["match_full_path"]),
            cache=SchemaCache(config["cache"]["directory"]),
            fetcher=fetcher,
        )

    async def resolve(
        self, file_name: str, root: str | None = None
    ) -> str | None:
        """Return the schema text for file_name, or None.

        Args:
            file_name: Document path (only the base name matters for
                slash-free catalog patterns)
            root: Optional project root for anchored catalog patterns

        Returns:
            Schema text, or None when no schema is available

        """
        resolved = await self.resolve_schema(file_name, root)
        return resolved.content if resolved is not None else None

    async def resolve_schema(
        self, file_name: str, root: str | None = None
    ) -> ResolvedSchema | None:
        """Return the matched schema URL and content for file_name.

        Args:
            file_name: Document path
            root: Optional project root for anchored catalog patterns

        Returns:
            ResolvedSchema, or None when no schema is available

        """
        try:
            catalog = await self.catalog_client.get_catalog()
        except SchemawardError as e:
            logger.warning("Schema catalog unavailable: %s", e)
            return None

        url = self.matcher.match(catalog, file_name, root)
        if url is None:
            return None

        return await self._flight.do(url, lambda: self._load(url))

    async def _load(self, url: str) -> ResolvedSchema | None:
        """Serve url from cache, refreshing it from the network if needed."""
        try:
            content = await self.cache.get(url)
        except CacheIOError as e:
            logger.warning("Treating unreadable cache entry as a miss: %s", e)
            content = None

        if content is not None:
            return ResolvedSchema(url=url, content=content)

        try:
            logger.info("Downloading schema from %s", url)
            content = await self.fetcher.fetch_text(url)
            self._check_json(content, url)
        except SchemawardError as e:
            logger.warning("Failed to download schema: %s", e)
            return await self._load_stale(url)

        try:
            await self.cache.put(url, content)
        except CacheIOError as e:
            logger.warning("Schema not cached: %s", e)

        return ResolvedSchema(url=url, content=content)

    async def _load_stale(self, url: str) -> ResolvedSchema | None:
        """Return the expired cache entry for url, if any."""
        try:
            content = await self.cache.get_stale(url)
        except CacheIOError as e:
            logger.warning("Stale cache entry unreadable: %s", e)
            return None

        if content is None:
            return None

        logger.info("Serving cached schema for %s after failed refresh", url)
        return ResolvedSchema(url=url, content=content, stale=True)

    @staticmethod
    def _check_json(content: str, url: str) -> None:
        """Reject a downloaded body that is not JSON."""
        try:
            orjson.loads(content)  # pylint: disable=no-member
        except orjson.JSONDecodeError as e:
            raise ParseError(str(e), target=url) from e
