"""
Open Graph / product meta tag reader (regex based, no DOM parser).
"""

import re
from functools import lru_cache
from typing import Optional

from src.utils.normalize import clean_text


@lru_cache(maxsize=64)
def _meta_patterns(attribute: str, value: str) -> tuple[re.Pattern, re.Pattern]:
    selector = rf"{attribute}\s*=\s*[\"']{re.escape(value)}[\"']"
    content = r"content\s*=\s*([\"'])([^>]*?)\1"
    return (
        re.compile(rf"<meta[^>]+{selector}[^>]+{content}", re.IGNORECASE),
        re.compile(rf"<meta[^>]+{content}[^>]+{selector}", re.IGNORECASE),
    )


def extract_meta_tag(html: str, attribute: str, value: str) -> Optional[str]:
    """
    Return the content of the first <meta attribute="value" content="..."> tag.

    Both attribute orders are accepted (selector before or after content).
    """
    for pattern in _meta_patterns(attribute, value):
        match = pattern.search(html or "")
        if match:
            return clean_text(match.group(2))
    return None


def first_meta(html: str, *selectors: tuple[str, str]) -> Optional[str]:
    """First non-empty meta content among (attribute, value) selectors."""
    for attribute, value in selectors:
        content = extract_meta_tag(html, attribute, value)
        if content:
            return content
    return None


def og_title(html: str) -> Optional[str]:
    return first_meta(html, ("property", "og:title"), ("name", "og:title"))


def og_description(html: str) -> Optional[str]:
    return first_meta(html, ("property", "og:description"), ("name", "description"))


def og_image(html: str) -> Optional[str]:
    return first_meta(html, ("property", "og:image"), ("name", "og:image"))


def meta_price(html: str) -> Optional[str]:
    return first_meta(
        html, ("property", "product:price:amount"), ("property", "product:price")
    )


def meta_brand(html: str) -> Optional[str]:
    return first_meta(html, ("property", "product:brand"), ("itemprop", "brand"))


def meta_color(html: str) -> Optional[str]:
    return first_meta(html, ("property", "product:color"), ("name", "color"))


def has_open_graph(html: str) -> bool:
    """True when the page declares og:title, og:description or og:image."""
    return any(
        extract_meta_tag(html, attribute, value)
        for attribute in ("property", "name")
        for value in ("og:title", "og:description", "og:image")
    )
