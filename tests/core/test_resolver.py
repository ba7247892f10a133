"""Tests for SchemaResolver: catalog, matcher and cache composed."""

import asyncio
import os
import time
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from schemaward.core.cache import SchemaCache
from schemaward.core.catalog import Catalog, CatalogClient
from schemaward.core.fetch import JsonFetcher
from schemaward.core.matcher import SchemaMatcher
from schemaward.core.resolver import SchemaResolver
from schemaward.exceptions import (
    CacheIOError,
    CatalogUnavailable,
    FetchFailed,
    NetworkError,
)
from tests.core.conftest import (
    CARGO_SCHEMA_URL,
    CATALOG_URL,
    SAMPLE_CATALOG,
)

CARGO_SCHEMA = '{"type": "object", "title": "Cargo"}'


@pytest.fixture
def catalog_client():
    """Catalog client mock serving the sample catalog."""
    client = MagicMock(spec=CatalogClient)
    client.get_catalog = AsyncMock(
        return_value=Catalog.from_api_response(SAMPLE_CATALOG)
    )
    return client


@pytest.fixture
def fetcher():
    """Fetcher mock returning the Cargo schema."""
    mock = MagicMock(spec=JsonFetcher)
    mock.fetch_text = AsyncMock(return_value=CARGO_SCHEMA)
    return mock


@pytest.fixture
def cache(tmp_path: Path) -> SchemaCache:
    """Real on-disk cache in a temporary directory."""
    return SchemaCache(tmp_path / "schemas")


@pytest.fixture
def resolver(catalog_client, fetcher, cache) -> SchemaResolver:
    """Resolver wired with mocks and a real cache."""
    return SchemaResolver(catalog_client, SchemaMatcher(), cache, fetcher)


def _expire(cache: SchemaCache, url: str) -> None:
    """Age a cache entry past the freshness window."""
    mtime = time.time() - 30 * 3600
    os.utime(cache._get_cache_file_path(url), (mtime, mtime))


@pytest.mark.asyncio
async def test_resolve_downloads_and_caches(resolver, fetcher, cache):
    """Test a miss downloads the schema and stores it."""
    content = await resolver.resolve("/repo/Cargo.toml")

    assert content == CARGO_SCHEMA
    fetcher.fetch_text.assert_awaited_once_with(CARGO_SCHEMA_URL)
    assert await cache.get(CARGO_SCHEMA_URL) == CARGO_SCHEMA


@pytest.mark.asyncio
async def test_fresh_cache_hit_skips_network(resolver, fetcher, cache):
    """Test a fresh entry is served without touching the network."""
    await cache.put(CARGO_SCHEMA_URL, '{"cached": true}')

    content = await resolver.resolve("Cargo.toml")

    assert content == '{"cached": true}'
    fetcher.fetch_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_stale_entry_is_refreshed(resolver, fetcher, cache):
    """Test an expired entry triggers a download that replaces it."""
    await cache.put(CARGO_SCHEMA_URL, '{"old": true}')
    _expire(cache, CARGO_SCHEMA_URL)

    content = await resolver.resolve("Cargo.toml")

    assert content == CARGO_SCHEMA
    assert cache.is_fresh(CARGO_SCHEMA_URL)


@pytest.mark.asyncio
async def test_failed_refresh_serves_stale(resolver, fetcher, cache, caplog):
    """Test an expired entry is served when the refresh fails."""
    await cache.put(CARGO_SCHEMA_URL, '{"old": true}')
    _expire(cache, CARGO_SCHEMA_URL)
    fetcher.fetch_text.side_effect = NetworkError("offline")

    with caplog.at_level("INFO"):
        resolved = await resolver.resolve_schema("Cargo.toml")

    assert resolved is not None
    assert resolved.content == '{"old": true}'
    assert resolved.stale
    assert "after failed refresh" in caplog.text


@pytest.mark.asyncio
async def test_failed_download_without_cache_returns_none(resolver, fetcher):
    """Test download failures with nothing cached give None."""
    fetcher.fetch_text.side_effect = FetchFailed(500, target=CARGO_SCHEMA_URL)

    assert await resolver.resolve("Cargo.toml") is None


@pytest.mark.asyncio
async def test_invalid_json_is_not_cached(resolver, fetcher, cache):
    """Test a non-JSON schema body is rejected and not stored."""
    fetcher.fetch_text.return_value = "<html>not json</html>"

    assert await resolver.resolve("Cargo.toml") is None
    assert await cache.get_stale(CARGO_SCHEMA_URL) is None


@pytest.mark.asyncio
async def test_no_matching_entry_returns_none(resolver, fetcher):
    """Test files without a catalog entry resolve to None."""
    assert await resolver.resolve("README.md") is None
    fetcher.fetch_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_catalog_unavailable_returns_none(
    resolver, catalog_client, fetcher
):
    """Test catalog failures are absorbed."""
    catalog_client.get_catalog.side_effect = CatalogUnavailable("cooldown")

    assert await resolver.resolve("Cargo.toml") is None
    fetcher.fetch_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_cache_write_failure_still_returns_schema(
    catalog_client, fetcher
):
    """Test a schema is returned even if it cannot be cached."""
    cache = MagicMock(spec=SchemaCache)
    cache.get = AsyncMock(return_value=None)
    cache.put = AsyncMock(side_effect=CacheIOError("disk full"))
    resolver = SchemaResolver(catalog_client, SchemaMatcher(), cache, fetcher)

    assert await resolver.resolve("Cargo.toml") == CARGO_SCHEMA


@pytest.mark.asyncio
async def test_unreadable_cache_is_treated_as_miss(catalog_client, fetcher):
    """Test a cache read error falls back to downloading."""
    cache = MagicMock(spec=SchemaCache)
    cache.get = AsyncMock(side_effect=CacheIOError("corrupt"))
    cache.put = AsyncMock()
    resolver = SchemaResolver(catalog_client, SchemaMatcher(), cache, fetcher)

    assert await resolver.resolve("Cargo.toml") == CARGO_SCHEMA
    fetcher.fetch_text.assert_awaited_once()


@pytest.mark.asyncio
async def test_resolve_schema_reports_url(resolver):
    """Test resolve_schema exposes the matched URL."""
    resolved = await resolver.resolve_schema("Cargo.toml")

    assert resolved is not None
    assert resolved.url == CARGO_SCHEMA_URL
    assert not resolved.stale


def _get_count(mocked, url: str) -> int:
    """Return how many GET requests aioresponses recorded for url."""
    return sum(
        len(calls)
        for (method, request_url), calls in mocked.requests.items()
        if method == "GET" and str(request_url) == url
    )


@pytest.mark.asyncio
async def test_concurrent_resolves_download_each_url_once(
    mock_aioresponse, session, cache
):
    """Test concurrent resolves share one catalog and one schema request."""
    mock_aioresponse.get(CATALOG_URL, payload=SAMPLE_CATALOG, repeat=True)
    mock_aioresponse.get(CARGO_SCHEMA_URL, body=CARGO_SCHEMA, repeat=True)
    fetcher = JsonFetcher(session)
    resolver = SchemaResolver(
        CatalogClient(fetcher, catalog_url=CATALOG_URL),
        SchemaMatcher(),
        cache,
        fetcher,
    )

    results = await asyncio.gather(
        *(resolver.resolve(f"/p{i}/Cargo.toml") for i in range(5))
    )

    assert results == [CARGO_SCHEMA] * 5
    assert _get_count(mock_aioresponse, CATALOG_URL) == 1
    assert _get_count(mock_aioresponse, CARGO_SCHEMA_URL) == 1


@pytest.mark.asyncio
async def test_long_schema_url_is_cached(catalog_client, fetcher, cache):
    """Test a schema with a long URL is downloaded once and then cached."""
    long_url = "https://json.test/" + "deep/" * 30 + "cargo.json"
    catalog_client.get_catalog.return_value = Catalog.from_api_response(
        {"schemas": [{"fileMatch": ["Cargo.toml"], "url": long_url}]}
    )
    resolver = SchemaResolver(catalog_client, SchemaMatcher(), cache, fetcher)

    for _ in range(3):
        assert await resolver.resolve("Cargo.toml") == CARGO_SCHEMA

    fetcher.fetch_text.assert_awaited_once_with(long_url)
