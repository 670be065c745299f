"""
Product transformer for validating and normalizing extracted page data.

The extractor hands over whatever it found; the models here enforce the
record's invariants (trimmed strings, sane price, palette colors, at most
five distinct image URLs) so callers can trust every field they read.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from src.utils.normalize import (
    MAX_IMAGES,
    clean_brand,
    clean_size,
    clean_text,
    dedupe_images,
    normalize_category,
    normalize_color,
    parse_price,
)

logger = logging.getLogger(__name__)


class ExtractionMetadata(BaseModel):
    """Where the record came from and which page signals were present."""

    url: str
    extracted: bool = True
    has_json_ld: bool = False
    has_open_graph: bool = False
    image_count: int = 0


class ExtractedProduct(BaseModel):
    """Validated product record. Every field is independently optional."""

    images: list[str] = Field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    metadata: ExtractionMetadata

    @field_validator("images", mode="before")
    @classmethod
    def clean_images(cls, v) -> list:
        return dedupe_images(v if isinstance(v, list) else [], limit=MAX_IMAGES)

    @field_validator("title", "description", mode="before")
    @classmethod
    def clean_strings(cls, v) -> Optional[str]:
        return clean_text(v)

    @field_validator("price", mode="before")
    @classmethod
    def clean_price(cls, v) -> Optional[float]:
        return parse_price(v)

    @field_validator("brand", mode="before")
    @classmethod
    def validate_brand(cls, v) -> Optional[str]:
        return clean_brand(v)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v) -> Optional[str]:
        return normalize_category(v)

    @field_validator("color", mode="before")
    @classmethod
    def validate_color(cls, v) -> Optional[str]:
        return normalize_color(v)

    @field_validator("size", mode="before")
    @classmethod
    def validate_size(cls, v) -> Optional[str]:
        return clean_size(v)

    @classmethod
    def empty(cls, url: str, extracted: bool = True) -> "ExtractedProduct":
        """An all-null record for a page nothing could be read from."""
        return cls(metadata=ExtractionMetadata(url=url, extracted=extracted))


class ProductTransformer:
    """Transforms a raw extraction into a validated ExtractedProduct."""

    def transform(self, raw) -> ExtractedProduct:
        """Validate raw extraction output; degrade to an empty record on failure."""
        try:
            product = ExtractedProduct(
                images=raw.images,
                title=raw.title,
                description=raw.description,
                price=raw.price,
                brand=raw.brand,
                category=raw.category,
                color=raw.color,
                size=raw.size,
                metadata=ExtractionMetadata(
                    url=raw.url,
                    has_json_ld=raw.has_json_ld,
                    has_open_graph=raw.has_open_graph,
                ),
            )
        except ValidationError as e:
            logger.warning("Error transforming extraction for %s: %s", raw.url, e)
            return ExtractedProduct.empty(str(raw.url))

        product.metadata.image_count = len(product.images)
        return product
