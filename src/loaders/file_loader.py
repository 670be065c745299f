"""
File loader for saving extracted products (and optionally their images) to disk.
"""

import asyncio
import hashlib
import json
import re
import ssl
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import aiofiles
import aiohttp
from rich.console import Console

from config.settings import StorageConfig, config
from src.transformers.product_transformer import ExtractedProduct

console = Console(stderr=True)


class FileLoader:
    """Saves extracted products to <output_dir>/<category>/<slug>/."""

    def __init__(self, storage_config: Optional[StorageConfig] = None):
        self.config = storage_config or config.storage
        self.config.ensure_dirs()

    def _sanitize_filename(self, name: str) -> str:
        """Create a safe filename from product name."""
        name = re.sub(r"[^\w\s-]", "", name.lower())
        name = re.sub(r"[\s]+", "_", name)
        return name[:50]

    def _get_product_dir(self, product: ExtractedProduct) -> Path:
        """Get the directory path for a product."""
        url = product.metadata.url
        label = product.title or urlparse(url).hostname or "product"
        url_hash = hashlib.sha1(url.encode("utf-8")).hexdigest()[:8]
        slug = f"{self._sanitize_filename(label) or 'product'}_{url_hash}"
        product_dir = self.config.output_dir / (product.category or "uncategorized") / slug
        product_dir.mkdir(parents=True, exist_ok=True)
        return product_dir

    def _image_extension(self, url: str) -> str:
        lowered = url.lower()
        if ".jpg" in lowered or ".jpeg" in lowered:
            return "jpg"
        if ".png" in lowered:
            return "png"
        if ".webp" in lowered:
            return "webp"
        if ".gif" in lowered:
            return "gif"
        return self.config.image_format

    async def download_image(
        self,
        url: str,
        save_path: Path,
        session: aiohttp.ClientSession,
        referer: Optional[str] = None,
    ) -> bool:
        """
        Download a single image.

        Returns:
            True if successful, False otherwise
        """
        try:
            headers = {
                "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
                "Accept": "image/webp,image/apng,image/*,*/*;q=0.8",
            }
            if referer:
                headers["Referer"] = referer

            timeout = aiohttp.ClientTimeout(total=30)
            async with session.get(url, headers=headers, timeout=timeout) as response:
                if response.status == 200:
                    content = await response.read()
                    async with aiofiles.open(save_path, "wb") as f:
                        await f.write(content)
                    return True
                console.print(
                    f"[yellow]Failed to download {url}: HTTP {response.status}[/yellow]"
                )
                return False

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            console.print(f"[red]Error downloading {url}: {e}[/red]")
            return False

    async def download_product_images(
        self, product: ExtractedProduct, product_dir: Path
    ) -> list[str]:
        """
        Download the product's images into product_dir.

        data: and blob: URIs are skipped (nothing to fetch).

        Returns:
            List of saved image filenames
        """
        saved_images = []
        image_urls = [
            url for url in product.images if not url.startswith(("data:", "blob:"))
        ]
        if not image_urls:
            console.print(f"[yellow]No images to download for {product.title or product.metadata.url}[/yellow]")
            return saved_images

        max_images = self.config.max_images_per_product
        images_to_download = image_urls if max_images == 0 else image_urls[:max_images]

        # SSL context that doesn't verify certificates (for macOS compatibility)
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

        connector = aiohttp.TCPConnector(ssl=ssl_context)
        async with aiohttp.ClientSession(connector=connector) as session:
            for i, url in enumerate(images_to_download):
                filename = f"image_{i+1:02d}.{self._image_extension(url)}"
                success = await self.download_image(
                    url, product_dir / filename, session, referer=product.metadata.url
                )
                if success:
                    saved_images.append(filename)
                    console.print(f"  [green]✓[/green] {filename}")

        return saved_images

    async def save_product(
        self, product: ExtractedProduct, download_images: Optional[bool] = None
    ) -> Optional[Path]:
        """
        Save product metadata (and images when enabled) to disk.

        Returns:
            Path to product directory if successful, None otherwise
        """
        if download_images is None:
            download_images = self.config.download_images
        try:
            product_dir = self._get_product_dir(product)
            console.print(f"\n[cyan]Saving {product.title or product.metadata.url} to {product_dir}[/cyan]")

            metadata_dict = product.model_dump(mode="json")
            if download_images:
                metadata_dict["local_images"] = await self.download_product_images(
                    product, product_dir
                )

            async with aiofiles.open(product_dir / "metadata.json", "w") as f:
                await f.write(json.dumps(metadata_dict, indent=2))

            console.print("  [green]✓[/green] metadata.json")
            return product_dir

        except OSError as e:
            console.print(
                f"[bold red]Error saving product {product.metadata.url}: {e}[/bold red]"
            )
            return None

    def generate_summary(self, products: list[ExtractedProduct]) -> dict:
        """Generate a summary of all extracted products."""
        summary = {
            "total_products": len(products),
            "categories": {},
            "price_range": {"min": None, "max": None},
            "products": [],
        }

        for product in products:
            cat = product.category or "uncategorized"
            summary["categories"][cat] = summary["categories"].get(cat, 0) + 1

            if product.price is not None:
                if (
                    summary["price_range"]["min"] is None
                    or product.price < summary["price_range"]["min"]
                ):
                    summary["price_range"]["min"] = product.price
                if (
                    summary["price_range"]["max"] is None
                    or product.price > summary["price_range"]["max"]
                ):
                    summary["price_range"]["max"] = product.price

            summary["products"].append(
                {
                    "url": product.metadata.url,
                    "title": product.title,
                    "category": cat,
                    "price": product.price,
                    "images_count": len(product.images),
                }
            )

        return summary

    async def save_summary(self, products: list[ExtractedProduct]) -> Path:
        """Save a summary JSON file."""
        summary = self.generate_summary(products)
        summary_path = self.config.output_dir / "summary.json"

        async with aiofiles.open(summary_path, "w") as f:
            await f.write(json.dumps(summary, indent=2))

        console.print(f"\n[cyan]Summary saved to {summary_path}[/cyan]")
        return summary_path
