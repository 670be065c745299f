"""
Configuration settings for the closet product extraction pipeline.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class FetchConfig:
    """Configuration for fetching product pages."""

    # Upstream fetch timeout (the page either arrives in time or we give up)
    timeout_seconds: float = 10.0
    follow_redirects: bool = True

    # Backend used by ExtractionMode.BACKEND
    backend_url: str = "http://localhost:3000"

    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # Browser-like headers for better compatibility with shop sites
    headers: dict = field(
        default_factory=lambda: {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
            "Sec-Fetch-Dest": "document",
            "Sec-Fetch-Mode": "navigate",
            "Sec-Fetch-Site": "none",
            "Cache-Control": "max-age=0",
        }
    )

    def request_headers(self) -> dict:
        """Full header set sent with every page request."""
        return {"User-Agent": self.user_agent, **self.headers}


@dataclass
class ExtractionConfig:
    """Limits and switches for the HTML extractor."""

    max_images: int = 5

    # Fall back to the shop's hostname when nothing on the page names a brand
    brand_from_domain: bool = True


@dataclass
class StorageConfig:
    """Configuration for saving extracted products locally."""

    base_dir: Path = field(
        default_factory=lambda: Path(__file__).parent.parent / "data"
    )
    download_images: bool = False
    max_images_per_product: int = 5  # 0 = unlimited
    image_format: str = "jpg"

    @property
    def output_dir(self) -> Path:
        """Get the output directory for extracted products."""
        return self.base_dir / "extracted"

    def ensure_dirs(self) -> None:
        """Create necessary directories if they don't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    log_level: str = "INFO"
    log_to_console: bool = True


@dataclass
class ServerConfig:
    """Configuration for the extraction HTTP API."""

    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False


@dataclass
class PipelineConfig:
    """Main configuration combining all settings."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls, base: Optional["PipelineConfig"] = None) -> "PipelineConfig":
        """Build a config, overriding defaults from CLOSET_* environment variables."""
        cfg = base or cls()
        if os.getenv("CLOSET_FETCH_TIMEOUT"):
            cfg.fetch.timeout_seconds = float(os.getenv("CLOSET_FETCH_TIMEOUT"))
        if os.getenv("CLOSET_BACKEND_URL"):
            cfg.fetch.backend_url = os.getenv("CLOSET_BACKEND_URL")
        if os.getenv("CLOSET_OUTPUT_DIR"):
            cfg.storage.base_dir = Path(os.getenv("CLOSET_OUTPUT_DIR"))
        if os.getenv("CLOSET_LOG_LEVEL"):
            cfg.logging.log_level = os.getenv("CLOSET_LOG_LEVEL").upper()
        if os.getenv("PORT"):
            cfg.server.port = int(os.getenv("PORT"))
        return cfg


# Default configuration instance
config = PipelineConfig()
