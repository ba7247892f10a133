"""aiohttp session factory for catalog and schema downloads.

One session is shared by the catalog client and every schema download of
a resolver, so connections to the schema hosts are pooled.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp

from schemaward.types import NetworkConfig

# Connection pool bounds
CONNECTION_LIMIT = 10
CONNECTION_LIMIT_PER_HOST = 4


def build_timeout(network_cfg: NetworkConfig) -> aiohttp.ClientTimeout:
    """Return a timeout bounding each whole request, connect included."""
    seconds = network_cfg["timeout_seconds"]
    return aiohttp.ClientTimeout(total=seconds, sock_connect=seconds)


@asynccontextmanager
async def create_http_session(
    network_cfg: NetworkConfig,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Open a ClientSession configured from the [network] settings.

    Args:
        network_cfg: Network section of the global configuration

    Yields:
        Session sending the configured User-Agent and JSON Accept header

    """
    connector = aiohttp.TCPConnector(
        limit=CONNECTION_LIMIT, limit_per_host=CONNECTION_LIMIT_PER_HOST
    )
    headers = {
        "User-Agent": network_cfg["user_agent"],
        "Accept": "application/json",
    }
    async with aiohttp.ClientSession(
        connector=connector,
        timeout=build_timeout(network_cfg),
        headers=headers,
    ) as session:
        yield session
