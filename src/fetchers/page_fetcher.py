"""
Product page fetcher.

Fetches a page server-side with browser-like headers and a bounded timeout.
Failures surface as FetchError subclasses carrying the HTTP status an API
should answer with; extraction itself never sees them.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import httpx
from rich.console import Console

from config.settings import FetchConfig, config

console = Console(stderr=True)


class FetchError(Exception):
    """Upstream fetch failed (network error, bad status, timeout)."""

    status_code: int = 502

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.url = url
        if status_code is not None:
            self.status_code = status_code


class InvalidUrlError(FetchError):
    status_code = 400


class FetchTimeoutError(FetchError):
    status_code = 408


class UpstreamStatusError(FetchError):
    """The page answered with a non-2xx status."""


@dataclass
class FetchedPage:
    """A fetched page, decoded to text."""

    url: str
    final_url: str
    status_code: int
    html: str


def validate_url(url) -> str:
    """Return the stripped URL if it is an absolute http(s) URL."""
    if not url or not isinstance(url, str):
        raise InvalidUrlError("URL is required")
    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError:
        raise InvalidUrlError("Invalid URL format", url=url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidUrlError("Invalid URL format", url=url)
    return url


class PageFetcher:
    """Fetches product pages with httpx."""

    def __init__(
        self,
        fetch_config: Optional[FetchConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = fetch_config or config.fetch
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.config.request_headers(),
            follow_redirects=self.config.follow_redirects,
            timeout=self.config.timeout_seconds,
            transport=self.transport,
        )

    async def start(self) -> None:
        """Open a shared client for several fetches."""
        if self._client is None:
            self._client = self._make_client()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a product page.

        Raises:
            InvalidUrlError: url is not an absolute http(s) URL
            FetchTimeoutError: no response within the configured timeout
            UpstreamStatusError: the page answered with a non-2xx status
            FetchError: any other network failure
        """
        url = validate_url(url)
        if self._client is None:
            async with self._make_client() as client:
                return await self._fetch_with(client, url)
        return await self._fetch_with(self._client, url)

    async def _fetch_with(self, client: httpx.AsyncClient, url: str) -> FetchedPage:
        try:
            response = await client.get(url)
        except httpx.TimeoutException:
            raise FetchTimeoutError(
                "Request timeout - URL took too long to respond", url=url
            )
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch URL: {e}", url=url)

        if not response.is_success:
            raise UpstreamStatusError(
                f"Failed to fetch URL: {response.reason_phrase}",
                status_code=response.status_code,
                url=url,
            )

        console.print(
            f"[dim]Fetched {url} ({response.status_code}, {len(response.content)} bytes)[/dim]"
        )
        return FetchedPage(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            html=response.text,
        )
