"""Page fetching for closet-extract."""

from .backend_client import BackendClient
from .page_fetcher import (
    FetchedPage,
    FetchError,
    FetchTimeoutError,
    InvalidUrlError,
    PageFetcher,
    UpstreamStatusError,
    validate_url,
)

__all__ = [
    "BackendClient",
    "FetchedPage",
    "FetchError",
    "FetchTimeoutError",
    "InvalidUrlError",
    "PageFetcher",
    "UpstreamStatusError",
    "validate_url",
]
