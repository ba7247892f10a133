"""Redirect-following HTTP fetcher for catalog and schema downloads.

Redirects are followed by hand so the hop count can be bounded and every
hop carries the same identifying headers. Concurrent requests for the same
URL share one download.
"""

from typing import Any
from urllib.parse import urljoin

import aiohttp
import orjson

from schemaward.constants import (
    HTTP_OK_MAX,
    HTTP_OK_MIN,
    HTTP_REDIRECT_MAX,
    HTTP_REDIRECT_MIN,
    MAX_REDIRECTS,
    USER_AGENT,
)
from schemaward.core.http_session import build_timeout
from schemaward.core.singleflight import SingleFlight
from schemaward.exceptions import (
    FetchFailed,
    NetworkError,
    ParseError,
    TooManyRedirects,
)
from schemaward.logger import get_logger
from schemaward.types import NetworkConfig

logger = get_logger(__name__)


class JsonFetcher:
    """Fetch JSON documents over HTTP with a bounded redirect chain."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        max_redirects: int = MAX_REDIRECTS,
        user_agent: str = USER_AGENT,
        timeout: aiohttp.ClientTimeout | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            session: aiohttp session for making requests
            max_redirects: Redirect hops followed before failing
            user_agent: User-Agent header sent on every hop
            timeout: Per-request timeout (session default when None)

        """
        self.session = session
        self.max_redirects = max_redirects
        self.user_agent = user_agent
        self.timeout = timeout
        self._flight: SingleFlight[str] = SingleFlight()

    @classmethod
    def from_config(
        cls, session: aiohttp.ClientSession, network_cfg: NetworkConfig
    ) -> "JsonFetcher":
        """Create a fetcher from the network section of the config."""
        return cls(
            session,
            max_redirects=network_cfg["max_redirects"],
            user_agent=network_cfg["user_agent"],
            timeout=build_timeout(network_cfg),
        )

    async def fetch_text(self, url: str) -> str:
        """Fetch the body at url as text.

        Args:
            url: Absolute http(s) URL

        Returns:
            Response body decoded as UTF-8

        Raises:
            NetworkError: Connection failure or timeout
            FetchFailed: Terminal response outside 2xx
            TooManyRedirects: Redirect chain longer than max_redirects
            ParseError: Body is not valid UTF-8

        """
        return await self._flight.do(url, lambda: self._get(url))

    async def fetch_json(self, url: str) -> Any:
        """Fetch and decode the JSON document at url.

        Raises:
            ParseError: Body is not valid JSON
            NetworkError: See fetch_text()

        """
        text = await self.fetch_text(url)
        try:
            return orjson.loads(text)  # pylint: disable=no-member
        except orjson.JSONDecodeError as e:
            raise ParseError(str(e), target=url) from e

    async def _get(self, url: str) -> str:
        """Perform the GET, following at most max_redirects redirects."""
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        current = url

        for hop in range(self.max_redirects + 1):
            try:
                async with self.session.get(
                    current,
                    headers=headers,
                    allow_redirects=False,
                    timeout=self.timeout,
                ) as response:
                    status = response.status
                    location = response.headers.get("Location")
                    if (
                        HTTP_REDIRECT_MIN <= status <= HTTP_REDIRECT_MAX
                        and location
                    ):
                        next_url = urljoin(current, location)
                    elif HTTP_OK_MIN <= status <= HTTP_OK_MAX:
                        body = await response.read()
                        return self._decode(body, current)
                    else:
                        raise FetchFailed(status, target=current)
            except (aiohttp.ClientError, TimeoutError) as e:
                msg = str(e) or type(e).__name__
                raise NetworkError(msg, target=current) from e

            logger.debug(
                "Redirect %d/%d: %s -> %s",
                hop + 1,
                self.max_redirects,
                current,
                next_url,
            )
            current = next_url

        raise TooManyRedirects(self.max_redirects, target=url)

    @staticmethod
    def _decode(body: bytes, url: str) -> str:
        """Decode a response body as UTF-8."""
        try:
            return body.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"body is not UTF-8: {e}", target=url) from e
