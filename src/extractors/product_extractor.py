"""
Product page extractor.

Turns the raw HTML of an arbitrary product page into an ExtractedProduct.
Every field is resolved through an ordered chain of sources:

    structured data (JSON-LD) -> meta tags (Open Graph) -> regex heuristics

The first source that yields a non-empty, normalized value wins. A source
that raises is treated as "no value"; extraction of the other fields goes
on regardless, so `extract` never raises for any HTML input.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from config.settings import ExtractionConfig, config
from src.extractors import heuristics, meta_tags, structured_data
from src.transformers.product_transformer import ExtractedProduct, ProductTransformer
from src.utils.normalize import clean_brand, parse_price

logger = logging.getLogger(__name__)

Source = Callable[[], Any]


@dataclass
class RawExtraction:
    """Field values as found on the page, before validation."""

    url: str
    images: list = field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    has_json_ld: bool = False
    has_open_graph: bool = False


def first_of(field_name: str, sources: list[Source]) -> Any:
    """Evaluate sources left to right; return the first non-empty result."""
    for source in sources:
        try:
            value = source()
        except Exception as e:
            logger.debug("Source for %s failed: %s", field_name, e)
            continue
        if value not in (None, "", [], {}):
            return value
    return None


def _safe(field_name: str, fn: Callable[[], Any], default: Any = None) -> Any:
    try:
        return fn()
    except Exception as e:
        logger.debug("Extracting %s failed: %s", field_name, e)
        return default


class ProductExtractor:
    """Extracts product data from raw HTML (no I/O, no shared state)."""

    def __init__(self, extraction_config: Optional[ExtractionConfig] = None):
        self.config = extraction_config or config.extraction
        self.transformer = ProductTransformer()

    def extract(self, html: str, base_url: str) -> ExtractedProduct:
        """Extract a validated product record. Never raises for malformed HTML."""
        raw = self.extract_raw(html, base_url)
        return self.transformer.transform(raw)

    def extract_raw(self, html: str, base_url: str) -> RawExtraction:
        html = html if isinstance(html, str) else ""
        data = _safe("structured data", lambda: structured_data.extract_json_ld(html))

        title = first_of(
            "title",
            [
                lambda: structured_data.structured_title(data),
                lambda: meta_tags.og_title(html),
                lambda: heuristics.title_tag(html),
            ],
        )
        description = first_of(
            "description",
            [
                lambda: structured_data.structured_description(data),
                lambda: meta_tags.og_description(html),
            ],
        )
        price = first_of(
            "price",
            [
                lambda: structured_data.structured_price(data),
                lambda: parse_price(meta_tags.meta_price(html)),
                lambda: heuristics.regex_price(html),
            ],
        )

        brand_sources = [
            lambda: structured_data.structured_brand(data),
            lambda: clean_brand(meta_tags.meta_brand(html)),
            lambda: heuristics.text_brand(html, title),
        ]
        if self.config.brand_from_domain:
            brand_sources.append(lambda: clean_brand(heuristics.domain_brand(base_url)))
        brand = first_of("brand", brand_sources)

        category = first_of(
            "category",
            [
                lambda: structured_data.structured_category(data),
                lambda: heuristics.keyword_category(base_url, title, description),
            ],
        )
        color = first_of(
            "color",
            [
                lambda: heuristics.palette_color(meta_tags.meta_color(html)),
                lambda: heuristics.text_color(html, title, description),
            ],
        )
        size = first_of("size", [lambda: heuristics.regex_size(html)])

        return RawExtraction(
            url=base_url,
            images=_safe("images", lambda: self._collect_images(html, base_url, data), []),
            title=title,
            description=description,
            price=price,
            brand=brand,
            category=category,
            color=color,
            size=size,
            has_json_ld=data is not None,
            has_open_graph=bool(_safe("open graph", lambda: meta_tags.has_open_graph(html))),
        )

    def _collect_images(
        self, html: str, base_url: str, data: Optional[dict]
    ) -> list[str]:
        """Merge structured, Open Graph and scanned images, deduplicated and capped."""
        limit = self.config.max_images
        images: list[str] = []

        def _add(url: Optional[str]) -> None:
            if not url or url.lower().startswith("data:") or len(images) >= limit:
                return
            absolute = heuristics.resolve_url(url, base_url)
            if absolute not in images:
                images.append(absolute)

        for url in _safe("structured images", lambda: structured_data.structured_images(data), []):
            _add(url)
        _add(_safe("og:image", lambda: meta_tags.og_image(html)))

        if len(images) < limit:
            images.extend(
                _safe(
                    "scanned images",
                    lambda: heuristics.scan_images(html, base_url, seen=images, limit=limit),
                    [],
                )
            )
        return images[:limit]


def extract(html: str, base_url: str) -> ExtractedProduct:
    """Extract structured product data from a page's HTML."""
    return ProductExtractor().extract(html, base_url)
