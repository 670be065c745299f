"""
Value normalizers shared by the extractors and the product transformer.

Each helper takes whatever a page gave us (string, number, None, or an
unexpected JSON shape) and returns either a clean value or None.
"""

import html
import math
import re
from typing import Any, Optional

from src.extractors.vocabulary import CATEGORIES, CANONICAL_COLORS, COLOR_ALIASES

MAX_PRICE = 100000.0
MAX_BRAND_LENGTH = 50
MAX_SIZE_LENGTH = 10
MAX_IMAGES = 5


def clean_text(value: Any) -> Optional[str]:
    """Unescape entities, collapse whitespace and trim. Empty -> None."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = html.unescape(str(value))
    text = re.sub(r"\s+", " ", text).strip()
    return text or None


def parse_price(value: Any) -> Optional[float]:
    """
    Parse a price from a number or a string like "$49.99" or "49.99 USD".

    Returns None unless the result is finite and inside (0, MAX_PRICE).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    else:
        digits = re.sub(r"[^0-9.]", "", str(value))
        if not digits:
            return None
        try:
            price = float(digits)
        except ValueError:
            return None
    if not math.isfinite(price) or price <= 0 or price >= MAX_PRICE:
        return None
    return price


def clean_brand(value: Any) -> Optional[str]:
    """Trim a brand name; reject one-character noise and cap the length."""
    brand = clean_text(value)
    if not brand or len(brand) <= 1:
        return None
    return brand[:MAX_BRAND_LENGTH].strip()


def clean_size(value: Any) -> Optional[str]:
    size = clean_text(value)
    if not size:
        return None
    return size[:MAX_SIZE_LENGTH].strip()


def normalize_color(value: Any) -> Optional[str]:
    """Canonicalize a palette color (grey -> gray, multi-color -> multicolor)."""
    color = clean_text(value)
    if not color:
        return None
    color = color.lower()
    color = COLOR_ALIASES.get(color, color)
    return color if color in CANONICAL_COLORS else None


def normalize_category(value: Any) -> Optional[str]:
    category = clean_text(value)
    if not category:
        return None
    category = category.lower()
    return category if category in CATEGORIES else None


def dedupe_images(urls: list, limit: int = MAX_IMAGES) -> list[str]:
    """Drop empties, data: URIs and duplicates, keeping first-seen order."""
    seen = set()
    result = []
    for url in urls or []:
        if not isinstance(url, str):
            continue
        cleaned = url.strip()
        if not cleaned or cleaned.lower().startswith("data:") or cleaned in seen:
            continue
        seen.add(cleaned)
        result.append(cleaned)
        if len(result) >= limit:
            break
    return result
