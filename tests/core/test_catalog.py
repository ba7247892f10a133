"""Tests for the schema catalog model and client."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from schemaward.core.catalog import Catalog, CatalogClient, CatalogEntry
from schemaward.core.fetch import JsonFetcher
from schemaward.exceptions import (
    CatalogParseError,
    CatalogUnavailable,
    NetworkError,
    ParseError,
)
from tests.core.conftest import CARGO_SCHEMA_URL, CATALOG_URL, SAMPLE_CATALOG


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fetcher():
    """Fetcher mock returning the sample catalog."""
    mock = MagicMock(spec=JsonFetcher)
    mock.fetch_json = AsyncMock(return_value=SAMPLE_CATALOG)
    return mock


class TestCatalogModel:
    """Test suite for Catalog and CatalogEntry parsing."""

    def test_from_api_response_keeps_order(self):
        """Test entries keep catalog order."""
        catalog = Catalog.from_api_response(SAMPLE_CATALOG)

        assert len(catalog) == 2
        assert catalog.entries[0].schema_url == CARGO_SCHEMA_URL
        assert catalog.entries[0].file_match == ("Cargo.toml",)
        assert catalog.entries[0].name == "Cargo"

    def test_entry_without_file_match_has_no_patterns(self):
        """Test a missing fileMatch gives an entry that never matches."""
        entry = CatalogEntry.from_api_response({"url": "https://x.test/s"})

        assert entry is not None
        assert entry.file_match == ()

    def test_entry_without_url_is_skipped(self):
        """Test malformed entries are dropped."""
        catalog = Catalog.from_api_response(
            {
                "schemas": [
                    {"fileMatch": ["a.toml"]},
                    "not-an-object",
                    {"url": "https://x.test/s", "fileMatch": "a.toml"},
                    {"url": "https://x.test/ok", "fileMatch": ["b.toml"]},
                ]
            }
        )

        assert [e.schema_url for e in catalog.entries] == ["https://x.test/ok"]

    @pytest.mark.parametrize("data", [[], {}, {"schemas": "nope"}, None])
    def test_missing_schemas_array_raises(self, data):
        """Test documents without a schemas array are rejected."""
        with pytest.raises(CatalogParseError):
            Catalog.from_api_response(data)


class TestCatalogClient:
    """Test suite for CatalogClient."""

    @pytest.mark.asyncio
    async def test_get_catalog_fetches_once(self, fetcher):
        """Test the catalog is memoized after the first fetch."""
        client = CatalogClient(fetcher, catalog_url=CATALOG_URL)

        first = await client.get_catalog()
        second = await client.get_catalog()

        assert first is second
        assert client.catalog is first
        fetcher.fetch_json.assert_awaited_once_with(CATALOG_URL)

    @pytest.mark.asyncio
    async def test_parse_error_becomes_catalog_parse_error(self, fetcher):
        """Test undecodable catalog bodies raise CatalogParseError."""
        fetcher.fetch_json.side_effect = ParseError("bad json")
        client = CatalogClient(fetcher, catalog_url=CATALOG_URL)

        with pytest.raises(CatalogParseError) as exc_info:
            await client.get_catalog()

        assert exc_info.value.target == CATALOG_URL
        assert client.catalog is None

    @pytest.mark.asyncio
    async def test_failure_within_cooldown_fails_fast(self, fetcher):
        """Test calls during the cooldown do not hit the network."""
        fetcher.fetch_json.side_effect = NetworkError("offline")
        clock = FakeClock()
        client = CatalogClient(fetcher, retry_cooldown=30, clock=clock)

        with pytest.raises(NetworkError):
            await client.get_catalog()

        clock.now += 10
        with pytest.raises(CatalogUnavailable):
            await client.get_catalog()
        assert fetcher.fetch_json.await_count == 1

    @pytest.mark.asyncio
    async def test_retry_after_cooldown(self, fetcher):
        """Test the fetch is retried once the cooldown has elapsed."""
        fetcher.fetch_json.side_effect = [
            NetworkError("offline"),
            SAMPLE_CATALOG,
        ]
        clock = FakeClock()
        client = CatalogClient(fetcher, retry_cooldown=30, clock=clock)

        with pytest.raises(NetworkError):
            await client.get_catalog()

        clock.now += 31
        catalog = await client.get_catalog()

        assert len(catalog) == 2
        assert fetcher.fetch_json.await_count == 2

    @pytest.mark.asyncio
    async def test_zero_cooldown_retries_every_call(self, fetcher):
        """Test a zero cooldown never fails fast."""
        fetcher.fetch_json.side_effect = NetworkError("offline")
        client = CatalogClient(fetcher, retry_cooldown=0)

        for _ in range(3):
            with pytest.raises(NetworkError):
                await client.get_catalog()

        assert fetcher.fetch_json.await_count == 3

    @pytest.mark.asyncio
    async def test_reset_forgets_catalog(self, fetcher):
        """Test reset() forces a new fetch."""
        client = CatalogClient(fetcher)
        await client.get_catalog()

        client.reset()
        await client.get_catalog()

        assert fetcher.fetch_json.await_count == 2
