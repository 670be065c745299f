"""
Client for a running extraction backend (POST /api/extract).

Used by ExtractionMode.BACKEND: the backend fetches and extracts the page,
this client only validates the record it sends back.
"""

from typing import Optional

import httpx
from pydantic import ValidationError
from rich.console import Console

from config.settings import FetchConfig, config
from src.fetchers.page_fetcher import (
    FetchError,
    FetchTimeoutError,
    InvalidUrlError,
    UpstreamStatusError,
    validate_url,
)
from src.transformers.product_transformer import ExtractedProduct

console = Console(stderr=True)


class BackendClient:
    """Async client for the /api/extract endpoint."""

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
        self._client = httpx.AsyncClient(
            base_url=self.config.backend_url.rstrip("/"),
            # Give the backend room for its own upstream timeout
            timeout=self.config.timeout_seconds + 5,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def extract(self, url: str) -> ExtractedProduct:
        """Ask the backend to extract `url`; backend errors become FetchErrors."""
        url = validate_url(url)
        if self._client is None:
            async with self:
                return await self._post(url)
        return await self._post(url)

    async def _post(self, url: str) -> ExtractedProduct:
        try:
            response = await self._client.post("/api/extract", json={"url": url})
        except httpx.TimeoutException:
            raise FetchTimeoutError("Backend request timed out", url=url)
        except httpx.HTTPError as e:
            raise FetchError(f"Backend unavailable: {e}", url=url)

        if not response.is_success:
            message = _error_message(response)
            if response.status_code == 408:
                raise FetchTimeoutError(message, url=url)
            if response.status_code == 400:
                raise InvalidUrlError(message, url=url)
            raise UpstreamStatusError(message, status_code=response.status_code, url=url)

        try:
            return ExtractedProduct.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            console.print(f"[red]Backend returned an invalid record for {url}: {e}[/red]")
            raise FetchError("Backend returned an invalid record", url=url)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"Backend error: HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return f"Backend error: HTTP {response.status_code}"
