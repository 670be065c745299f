"""
JSON-LD reader.

Finds every <script type="application/ld+json"> block in a page, parses the
ones that are valid JSON and picks the object that best describes the
product on the page.
"""

import json
import logging
import re
from typing import Any, Optional

from src.extractors.vocabulary import STRUCTURED_CATEGORY_HINTS
from src.utils.normalize import clean_brand, clean_text, parse_price

logger = logging.getLogger(__name__)

JSON_LD_PATTERN = re.compile(
    r"<script[^>]+type=[\"']application/ld\+json[\"'][^>]*>([\s\S]*?)</script>",
    re.IGNORECASE,
)

SCHEMA_PREFIXES = ("http://schema.org/", "https://schema.org/")


def parse_json_ld_blocks(html: str) -> list[Any]:
    """Parse all JSON-LD blocks, silently skipping invalid JSON."""
    blocks = []
    for match in JSON_LD_PATTERN.finditer(html or ""):
        body = match.group(1).strip()
        if not body:
            continue
        try:
            blocks.append(json.loads(body))
        except ValueError as e:
            logger.debug("Skipping invalid JSON-LD block: %s", e)
    return blocks


def _flatten(blocks: list[Any]) -> list[dict]:
    """Top-level arrays and @graph containers contribute each of their objects."""
    items = []
    for block in blocks:
        for item in block if isinstance(block, list) else [block]:
            if not isinstance(item, dict):
                continue
            items.append(item)
            graph = item.get("@graph")
            if isinstance(graph, list):
                items.extend(node for node in graph if isinstance(node, dict))
    return items


def _type_matches(item: Any, type_name: str) -> bool:
    if not isinstance(item, dict):
        return False
    declared = item.get("@type")
    declared = declared if isinstance(declared, list) else [declared]
    for value in declared:
        if not isinstance(value, str):
            continue
        value = value.strip()
        for prefix in SCHEMA_PREFIXES:
            if value.lower().startswith(prefix):
                value = value[len(prefix):]
                break
        if value.lower() == type_name.lower():
            return True
    return False


def select_product(blocks: list[Any]) -> Optional[dict]:
    """
    Pick the structured-data object describing the product.

    Order: first Product object, then the first Product wrapped by an
    ItemList, then the first parsed object of any type.
    """
    items = _flatten(blocks)

    for item in items:
        if _type_matches(item, "Product"):
            return item

    for item in items:
        if not _type_matches(item, "ItemList"):
            continue
        elements = item.get("itemListElement")
        if not isinstance(elements, list) or not elements:
            continue
        first = elements[0]
        if isinstance(first, dict):
            if _type_matches(first.get("item"), "Product"):
                return first["item"]
            if _type_matches(first, "Product"):
                return first

    return items[0] if items else None


def extract_json_ld(html: str) -> Optional[dict]:
    """Return the selected structured-data object for a page, or None."""
    try:
        return select_product(parse_json_ld_blocks(html))
    except Exception as e:
        logger.debug("JSON-LD selection failed: %s", e)
        return None


# ----------------------------------------------------------------------
# Field readers. Each takes the selected object (or None) and returns a
# normalized value or None; the object may have any shape.
# ----------------------------------------------------------------------


def _name_of(value: Any) -> Any:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value.get("name")
    return value


def structured_title(data: Optional[dict]) -> Optional[str]:
    return clean_text(data.get("name")) if data else None


def structured_description(data: Optional[dict]) -> Optional[str]:
    return clean_text(data.get("description")) if data else None


def structured_images(data: Optional[dict]) -> list[str]:
    """Image URLs from `image` (string, list, or ImageObject)."""
    if not data or not data.get("image"):
        return []
    raw = data["image"]
    entries = raw if isinstance(raw, list) else [raw]
    urls = []
    for entry in entries:
        if isinstance(entry, dict):
            entry = entry.get("url") or entry.get("contentUrl")
        if isinstance(entry, str) and entry.strip():
            urls.append(entry.strip())
    return urls


def structured_price(data: Optional[dict]) -> Optional[float]:
    """Price from `offers` (single, list, or AggregateOffer) then `price`."""
    if not data:
        return None
    offers = data.get("offers")
    for offer in offers if isinstance(offers, list) else [offers]:
        if not isinstance(offer, dict):
            continue
        price = parse_price(offer.get("price")) or parse_price(offer.get("lowPrice"))
        if price is not None:
            return price
    return parse_price(data.get("price"))


def structured_brand(data: Optional[dict]) -> Optional[str]:
    if not data:
        return None
    return clean_brand(_name_of(data.get("brand"))) or clean_brand(
        _name_of(data.get("manufacturer"))
    )


def structured_category(data: Optional[dict]) -> Optional[str]:
    """Map category / productCategory / @type onto a closet category."""
    if not data:
        return None
    for key in ("category", "productCategory", "@type"):
        value = data.get(key)
        if isinstance(value, list):
            value = " ".join(str(_name_of(v) or "") for v in value)
        value = _name_of(value)
        if not isinstance(value, str) or not value:
            continue
        text = value.lower()
        for category, hints in STRUCTURED_CATEGORY_HINTS:
            if any(hint in text for hint in hints):
                return category
    return None
