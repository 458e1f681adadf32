# ABOUTME: Async HTTP client for wiki pages built on httpx with retry and rate limiting
# ABOUTME: Returns raw HTML or a parsed BeautifulSoup document; extraction never touches the network

from __future__ import annotations

import httpx
from bs4 import BeautifulSoup

from appledata.config import Config, get_config
from appledata.extraction.html import parse_document
from appledata.utils.logging import get_logger
from appledata.utils.retry import RateLimiter, fetch_retry, status_error


class WikiClient:
    """Fetches wiki pages over HTTP.

    Use as an async context manager, or call close() when done:

        async with WikiClient() as client:
            document = await client.fetch_document(url)
    """

    def __init__(
        self,
        config: Config | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        min_wait: float = 1.0,
        max_wait: float = 10.0,
    ):
        """Initialize the client.

        Args:
            config: Settings for user agent, timeout, TLS, retries and rate (defaults to get_config())
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
            min_wait: Minimum backoff between retries in seconds
            max_wait: Maximum backoff between retries in seconds
        """
        self.config = config or get_config()
        self.logger = get_logger(__name__)
        self.rate_limiter = RateLimiter(self.config.requests_per_second)

        self._client = httpx.AsyncClient(
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.request_timeout,
            verify=self.config.verify_tls,
            follow_redirects=True,
            transport=transport,
        )
        self._get = fetch_retry(
            max_attempts=self.config.max_retries,
            min_wait=min_wait,
            max_wait=max_wait,
            rate_limiter=self.rate_limiter,
        )(self._get_once)

        if not self.config.verify_tls:
            self.logger.warning("TLS certificate verification is disabled")

    async def __aenter__(self) -> WikiClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_once(self, url: str) -> str:
        response = await self._client.get(url)
        if not response.is_success:
            raise status_error(response, url)
        return response.text

    async def fetch_html(self, url: str) -> str:
        """Fetch a page and return its HTML.

        Raises:
            FetchError: the page could not be fetched after all retries
        """
        self.logger.debug("Fetching page", url=url)
        html = await self._get(url)
        self.logger.info("Fetched page", url=url, size=len(html))
        return html

    async def fetch_document(self, url: str) -> BeautifulSoup:
        """Fetch a page and parse it for extraction."""
        return parse_document(await self.fetch_html(url))
