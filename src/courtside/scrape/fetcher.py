"""
Page fetcher for source websites.

One GET per call with a fixed browser User-Agent and no retry. A failed
source is reported upward as FetchError and the refresh pipeline decides
what the source yields instead.

Usage:
    async with PageFetcher() as fetcher:
        html = await fetcher.fetch("https://www.atptour.com/en/rankings/singles")
"""

import logging
from typing import Optional

import httpx

from courtside.config import settings

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A source page could not be retrieved (network failure or non-2xx)."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}" if status_code is not None else reason
        super().__init__(f"Failed to fetch {url}: {detail}")


class PageFetcher:
    """
    Async context manager wrapping a single httpx.AsyncClient.

    Args:
        user_agent: Client identity sent with each request
                    (defaults to settings.scrape_user_agent)
        timeout: Request timeout in seconds (defaults to settings.scrape_timeout)
        transport: Optional httpx transport, used by tests to serve canned pages
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.user_agent = user_agent or settings.scrape_user_agent
        self.timeout = timeout if timeout is not None else settings.scrape_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "PageFetcher":
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> str:
        """
        Fetch a page and return its body as text.

        Raises:
            FetchError: On any transport error or non-success status
            RuntimeError: If used outside ``async with``
        """
        if self._client is None:
            raise RuntimeError("Fetcher not initialized. Use 'async with' context manager.")

        logger.info("Fetching %s", url)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(url, reason=str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise FetchError(url, status_code=response.status_code)

        return response.text
