"""
Extraction pipeline orchestrating fetch, extraction, validation and loading.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import PipelineConfig, config
from src.extractors.product_extractor import ProductExtractor
from src.fetchers.backend_client import BackendClient
from src.fetchers.page_fetcher import FetchError, PageFetcher
from src.loaders.file_loader import FileLoader
from src.transformers.product_transformer import ExtractedProduct

# stdout is reserved for --json records
console = Console(stderr=True)


class ExtractionMode(str, Enum):
    """Where extraction happens."""

    LOCAL = "local"  # fetch and extract in this process
    BACKEND = "backend"  # delegate to a running /api/extract backend


class ExtractionPipeline:
    """
    Pipeline for turning product URLs into closet item records.

    Orchestrates:
    - Fetch: download the page (or hand the URL to the backend)
    - Extract: recover product fields from the HTML
    - Load: optionally save records (and images) locally
    """

    def __init__(
        self,
        pipeline_config: Optional[PipelineConfig] = None,
        mode: ExtractionMode = ExtractionMode.LOCAL,
        save_local: bool = False,
        download_images: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = pipeline_config or config
        self.mode = ExtractionMode(mode)
        self.save_local = save_local
        self.download_images = download_images
        self.transport = transport
        self.extractor = ProductExtractor(self.config.extraction)
        self.loader: Optional[FileLoader] = (
            FileLoader(self.config.storage) if save_local else None
        )

    def extract_html(self, html: str, base_url: str) -> ExtractedProduct:
        """Extract from HTML already in hand (no I/O)."""
        return self.extractor.extract(html, base_url)

    async def extract_url(self, url: str) -> ExtractedProduct:
        """
        Fetch and extract a single URL.

        Raises:
            FetchError: the page (or backend) could not be fetched
        """
        async with self._make_client() as client:
            return await self._extract_with(client, url)

    async def save(self, product: ExtractedProduct) -> Optional[Path]:
        """Save one record locally; None when local saving is off or fails."""
        if not self.loader:
            return None
        return await self.loader.save_product(
            product, download_images=self.download_images
        )

    def _make_client(self):
        if self.mode == ExtractionMode.BACKEND:
            return BackendClient(self.config.fetch, transport=self.transport)
        return PageFetcher(self.config.fetch, transport=self.transport)

    async def _extract_with(self, client, url: str) -> ExtractedProduct:
        if isinstance(client, BackendClient):
            return await client.extract(url)
        page = await client.fetch(url)
        # Relative links resolve against the page URL that was requested
        return self.extractor.extract(page.html, page.url)

    async def run(self, urls: list[str]) -> dict:
        """
        Extract every URL; one failing URL never stops the batch.

        Returns:
            Summary dict with pipeline results
        """
        start_time = datetime.now()
        products: list[ExtractedProduct] = []
        errors: dict[str, str] = {}
        saved_paths = []

        self._print_header(urls)

        async with self._make_client() as client:
            for url in urls:
                console.print(f"\n[cyan]Extracting: {url}[/cyan]")
                try:
                    product = await self._extract_with(client, url)
                except FetchError as e:
                    console.print(
                        f"[bold red]✗ {url}: {e.message} (HTTP {e.status_code})[/bold red]"
                    )
                    errors[url] = e.message
                    continue

                products.append(product)
                console.print(
                    f"[green]✓ Extracted: {product.title or '(untitled)'} "
                    f"({product.metadata.image_count} images)[/green]"
                )

                if self.loader:
                    path = await self.save(product)
                    if path:
                        saved_paths.append(path)

        if self.loader and products:
            await self.loader.save_summary(products)

        elapsed = (datetime.now() - start_time).total_seconds()
        self._print_summary(products, errors, elapsed)

        return {
            "success": not errors,
            "extracted": len(products),
            "failed": len(errors),
            "errors": errors,
            "saved": [str(p) for p in saved_paths],
            "elapsed_seconds": elapsed,
            "products": [p.model_dump(mode="json") for p in products],
        }

    def _print_header(self, urls: list[str]) -> None:
        console.print(
            Panel(
                f"[bold]Mode:[/bold] {self.mode.value}\n"
                f"[bold]URLs:[/bold] {len(urls)}\n"
                f"[bold]Save locally:[/bold] {'yes' if self.save_local else 'no'}",
                title="Closet Product Extraction",
                border_style="blue",
            )
        )

    def _print_summary(
        self, products: list[ExtractedProduct], errors: dict[str, str], elapsed: float
    ) -> None:
        table = Table(title="Extraction Summary")
        table.add_column("Title", style="cyan", max_width=40)
        table.add_column("Price", justify="right")
        table.add_column("Brand")
        table.add_column("Category")
        table.add_column("Color")
        table.add_column("Size")
        table.add_column("Images", justify="right")

        for product in products:
            table.add_row(
                product.title or "-",
                f"{product.price:.2f}" if product.price is not None else "-",
                product.brand or "-",
                product.category or "-",
                product.color or "-",
                product.size or "-",
                str(product.metadata.image_count),
            )

        console.print()
        console.print(table)
        status = "green" if not errors else "yellow"
        console.print(
            f"[bold {status}]{len(products)} extracted, {len(errors)} failed "
            f"in {elapsed:.1f}s[/bold {status}]"
        )
