"""
Regex fallback extractors for product pages.

These run when neither structured data nor meta tags supply a field. They
are best-effort: every pattern list is tried in its declared order and the
first plausible match wins.
"""

import html as html_lib
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from src.extractors.vocabulary import (
    BACKGROUND_INCLUDE_KEYWORDS,
    CATEGORY_KEYWORDS,
    COLOR_PALETTE,
    IMAGE_EXCLUDE_KEYWORDS,
    IMAGE_INCLUDE_KEYWORDS,
)
from src.utils.normalize import (
    MAX_BRAND_LENGTH,
    MAX_SIZE_LENGTH,
    clean_brand,
    clean_text,
    normalize_color,
    parse_price,
)

TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)

# One combined pattern for src and the usual lazy-loading attributes
IMG_PATTERN = re.compile(
    r"<img[^>]+(?:src|data-src|data-lazy-src|data-original|data-srcset|srcset"
    r"|data-image|data-product-image)=[\"']([^\"']+)[\"'][^>]*>",
    re.IGNORECASE,
)
BACKGROUND_PATTERN = re.compile(
    r"background-image[^:]*:\s*url\([\"']?([^\"')]+)[\"']?\)", re.IGNORECASE
)
IMAGE_EXTENSION = re.compile(r"\.(jpg|jpeg|png|webp|gif)", re.IGNORECASE)
BACKGROUND_EXTENSION = re.compile(r"\.(jpg|jpeg|png|webp)", re.IGNORECASE)

CURRENCY = r"[\$£€¥]"

# Ordered: generic currency text, embedded JSON, then marketplace markup
PRICE_PATTERNS = [
    re.compile(rf"{CURRENCY}\s*(\d+\.?\d*)"),
    re.compile(rf"price[:\s]*{CURRENCY}?\s*(\d+\.?\d*)", re.IGNORECASE),
    re.compile(rf"(\d+\.?\d*)\s*{CURRENCY}"),
    re.compile(r"\"price\"[:\s]*\"([^\"]+)\"", re.IGNORECASE),
    re.compile(r"\"price\"[:\s]*(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"priceAmount[\"\s:]+(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"\"amount\"[:\s]*(\d+\.?\d*)", re.IGNORECASE),
    # Amazon
    re.compile(r"a-price-whole[^>]*>(\d+)", re.IGNORECASE),
    re.compile(r"a-price-fraction[^>]*>(\d+)", re.IGNORECASE),
    # Shopify
    re.compile(rf"product-price[^>]*>{CURRENCY}?\s*(\d+\.?\d*)", re.IGNORECASE),
    re.compile(rf"price[^>]*class[^>]*>{CURRENCY}?\s*(\d+\.?\d*)", re.IGNORECASE),
    re.compile(rf"class=\"[^\"]*price[^\"]*\"[^>]*>{CURRENCY}?\s*(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"data-price[=:]\s*[\"']?(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"priceValue[=:]\s*[\"']?(\d+\.?\d*)", re.IGNORECASE),
]

BRAND_PATTERNS = [
    re.compile(r"brand[:\s]*[\"']?([^\"'\s<]+)", re.IGNORECASE),
    re.compile(r"by\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)"),
    re.compile(r"manufacturer[:\s]*[\"']?([^\"'\s<]+)", re.IGNORECASE),
    re.compile(r"itemprop=[\"']brand[\"'][^>]*content=[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(r"\"brand\"[:\s]*\"([^\"]+)\"", re.IGNORECASE),
]

LETTER_SIZE = r"XXXL|XXL|XL|XS|S|M|L"
SIZE_PATTERNS = [
    re.compile(rf"size[:\s]*({LETTER_SIZE}|\d+)\b", re.IGNORECASE),
    re.compile(rf"\b({LETTER_SIZE})\b"),
    re.compile(r"(\d+)\s*(?:US|EU|UK)?\s*size", re.IGNORECASE),
    re.compile(r"\"size\"[:\s]*\"([^\"]+)\"", re.IGNORECASE),
    re.compile(r"\"size\"[:\s]*(\d+)", re.IGNORECASE),
    re.compile(r"data-size[=:]\s*[\"']?([^\"'\s]+)", re.IGNORECASE),
    re.compile(r"itemprop=[\"']size[\"'][^>]*content=[\"']([^\"']+)[\"']", re.IGNORECASE),
    re.compile(rf"selected[^>]*size[^>]*>({LETTER_SIZE}|\d+)", re.IGNORECASE),
    re.compile(rf"size-option[^>]*selected[^>]*>({LETTER_SIZE}|\d+)", re.IGNORECASE),
]


def resolve_url(url: str, base_url: str) -> str:
    """Resolve a possibly relative URL against the page URL."""
    try:
        return urljoin(base_url, url)
    except ValueError:
        return url


def title_tag(html: str) -> Optional[str]:
    match = TITLE_PATTERN.search(html or "")
    return clean_text(match.group(1)) if match else None


# ----------------------------------------------------------------------
# Images
# ----------------------------------------------------------------------


def _srcset_candidate(src: str) -> str:
    """For srcset-style lists take the last (largest) entry without its descriptor."""
    if "," in src:
        src = src.split(",")[-1].strip()
        src = src.split()[0] if src.split() else ""
    return src


def _is_excluded(src: str) -> bool:
    lowered = src.lower()
    return any(keyword in lowered for keyword in IMAGE_EXCLUDE_KEYWORDS)


def is_product_image(src: str) -> bool:
    """Keep product shots, drop icons/logos and other chrome."""
    if _is_excluded(src):
        return False
    lowered = src.lower()
    return any(keyword in lowered for keyword in IMAGE_INCLUDE_KEYWORDS) or bool(
        IMAGE_EXTENSION.search(src)
    )


def is_product_background(src: str) -> bool:
    if _is_excluded(src):
        return False
    lowered = src.lower()
    return any(keyword in lowered for keyword in BACKGROUND_INCLUDE_KEYWORDS) or bool(
        BACKGROUND_EXTENSION.search(src)
    )


def scan_images(
    html: str, base_url: str, seen: Optional[list[str]] = None, limit: int = 5
) -> list[str]:
    """
    Scan <img> tags, then CSS background images, for product image URLs.

    `seen` holds URLs already collected from higher-priority sources; they
    count toward `limit` and are never repeated. Returns only the new URLs.
    """
    collected = list(seen or [])
    found = []

    def _accept(src: str) -> None:
        absolute = resolve_url(src, base_url)
        if absolute not in collected:
            collected.append(absolute)
            found.append(absolute)

    for match in IMG_PATTERN.finditer(html or ""):
        if len(collected) >= limit:
            return found
        raw = html_lib.unescape(match.group(1)).strip()
        if raw.lower().startswith("data:"):
            continue
        src = _srcset_candidate(raw)
        if not src or src.lower().startswith("data:"):
            continue
        if is_product_image(src):
            _accept(src)

    for match in BACKGROUND_PATTERN.finditer(html or ""):
        if len(collected) >= limit:
            return found
        src = html_lib.unescape(match.group(1)).strip().strip("\"'")
        if not src or src.lower().startswith("data:"):
            continue
        if is_product_background(src):
            _accept(src)

    return found


# ----------------------------------------------------------------------
# Price / brand / size
# ----------------------------------------------------------------------


def regex_price(html: str) -> Optional[float]:
    """First pattern whose match parses to a price inside the sanity range."""
    for pattern in PRICE_PATTERNS:
        match = pattern.search(html or "")
        if match:
            price = parse_price(match.group(1))
            if price is not None:
                return price
    return None


def text_brand(html: str, title: Optional[str]) -> Optional[str]:
    text = f"{html or ''} {title or ''}"
    for pattern in BRAND_PATTERNS:
        match = pattern.search(text)
        if match and 1 < len(match.group(1)) < MAX_BRAND_LENGTH:
            return clean_brand(match.group(1))
    return None


def domain_brand(url: str) -> Optional[str]:
    """Brand guess from the shop's hostname (gymshark.com -> Gymshark)."""
    hostname = urlparse(url).hostname or ""
    domain = re.sub(r"^www\.", "", hostname).split(".")[0]
    if len(domain) > 1:
        return domain[0].upper() + domain[1:]
    return None


def regex_size(html: str) -> Optional[str]:
    for pattern in SIZE_PATTERNS:
        match = pattern.search(html or "")
        if match and match.group(1):
            size = match.group(1).strip()
            if size and len(size) < MAX_SIZE_LENGTH:
                return size
    return None


# ----------------------------------------------------------------------
# Category / color
# ----------------------------------------------------------------------


def keyword_category(
    url: str, title: Optional[str], description: Optional[str]
) -> Optional[str]:
    text = f"{url or ''} {title or ''} {description or ''}".lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return category
    return None


def palette_color(value: Optional[str]) -> Optional[str]:
    """First palette color contained in a meta color value ("Navy Blue" -> navy)."""
    if not value:
        return None
    lowered = value.lower()
    for color in COLOR_PALETTE:
        if color in lowered:
            return normalize_color(color)
    return None


def text_color(
    html: str, title: Optional[str], description: Optional[str]
) -> Optional[str]:
    """
    First palette color appearing as a delimited word in the page text.

    A color counts when surrounded by spaces, by hyphens, or at the very end
    after a space, so "bluetooth" or "redirect" never match.
    """
    text = f"{html or ''} {title or ''} {description or ''}".lower()
    for color in COLOR_PALETTE:
        if f" {color} " in text or f"-{color}-" in text or text.endswith(f" {color}"):
            return normalize_color(color)
    return None
