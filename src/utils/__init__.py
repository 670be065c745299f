"""Utility modules for closet-extract."""

from .normalize import (
    MAX_BRAND_LENGTH,
    MAX_IMAGES,
    MAX_PRICE,
    MAX_SIZE_LENGTH,
    clean_brand,
    clean_size,
    clean_text,
    dedupe_images,
    normalize_category,
    normalize_color,
    parse_price,
)

__all__ = [
    "MAX_BRAND_LENGTH",
    "MAX_IMAGES",
    "MAX_PRICE",
    "MAX_SIZE_LENGTH",
    "clean_brand",
    "clean_size",
    "clean_text",
    "dedupe_images",
    "normalize_category",
    "normalize_color",
    "parse_price",
]
