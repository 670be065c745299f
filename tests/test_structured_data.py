"""Tests for JSON-LD parsing, product selection and field readers."""

import json

from src.extractors.structured_data import (
    extract_json_ld,
    parse_json_ld_blocks,
    select_product,
    structured_brand,
    structured_category,
    structured_images,
    structured_price,
)


def _script(payload) -> str:
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return f'<script type="application/ld+json">{body}</script>'


def test_invalid_blocks_are_skipped():
    html = _script("{oops") + _script({"@type": "Product", "name": "Tee"})
    blocks = parse_json_ld_blocks(html)
    assert blocks == [{"@type": "Product", "name": "Tee"}]


def test_product_preferred_over_earlier_blocks():
    html = _script({"@type": "Organization", "name": "Shop"}) + _script(
        {"@type": "Product", "name": "Tee"}
    )
    assert extract_json_ld(html)["name"] == "Tee"


def test_product_type_namespaces_and_case():
    for declared in ("https://schema.org/Product", "http://schema.org/Product", "product"):
        data = select_product([{"@type": declared, "name": declared}])
        assert data["name"] == declared


def test_product_inside_top_level_array_and_graph():
    assert select_product([[{"@type": "BreadcrumbList"}, {"@type": "Product", "name": "A"}]])["name"] == "A"
    graph = {"@context": "https://schema.org", "@graph": [{"@type": "WebPage"}, {"@type": "Product", "name": "B"}]}
    assert select_product([graph])["name"] == "B"


def test_item_list_fallback():
    item_list = {
        "@type": "ItemList",
        "itemListElement": [
            {"@type": "ListItem", "position": 1, "item": {"@type": "Product", "name": "Listed Tee"}},
            {"@type": "ListItem", "position": 2, "item": {"@type": "Product", "name": "Second"}},
        ],
    }
    assert select_product([{"@type": "WebSite"}, item_list])["name"] == "Listed Tee"


def test_first_block_as_last_resort():
    data = select_product([{"@type": "WebPage", "name": "Page Name"}, {"@type": "Organization"}])
    assert data["name"] == "Page Name"
    assert select_product([]) is None
    assert select_product([1, "x", None]) is None


def test_images_accept_strings_lists_and_image_objects():
    assert structured_images({"image": "https://cdn.test/a.jpg"}) == ["https://cdn.test/a.jpg"]
    assert structured_images(
        {"image": ["https://cdn.test/a.jpg", {"url": "https://cdn.test/b.jpg"}, {"contentUrl": "https://cdn.test/c.jpg"}]}
    ) == ["https://cdn.test/a.jpg", "https://cdn.test/b.jpg", "https://cdn.test/c.jpg"]
    assert structured_images(None) == []


def test_price_from_offers_variants():
    assert structured_price({"offers": {"price": 25}}) == 25.0
    assert structured_price({"offers": [{"price": "bad"}, {"price": "30.00"}]}) == 30.0
    assert structured_price({"offers": {"@type": "AggregateOffer", "lowPrice": "12.5"}}) == 12.5
    assert structured_price({"price": "$8"}) == 8.0
    assert structured_price({"offers": {"price": -3}}) is None


def test_brand_shapes():
    assert structured_brand({"brand": "Levi's"}) == "Levi's"
    assert structured_brand({"brand": {"@type": "Brand", "name": "Uniqlo"}}) == "Uniqlo"
    assert structured_brand({"manufacturer": {"name": "Made Co"}}) == "Made Co"
    assert structured_brand({"brand": "X"}) is None


def test_category_mapping():
    assert structured_category({"category": "Apparel > Footwear"}) == "shoes"
    assert structured_category({"productCategory": {"name": "Trousers"}}) == "bottoms"
    assert structured_category({"category": "Winter Coats"}) == "outerwear"
    assert structured_category({"category": "Accessories"}) == "accessories"
    assert structured_category({"category": "Home & Garden", "@type": "Product"}) is None
