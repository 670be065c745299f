"""Tests for the regex fallback extractors."""

import pytest

from src.extractors.heuristics import (
    domain_brand,
    is_product_image,
    keyword_category,
    palette_color,
    regex_price,
    regex_size,
    resolve_url,
    scan_images,
    text_brand,
    text_color,
)
from src.extractors.meta_tags import extract_meta_tag, og_description
from src.extractors.product_extractor import extract

BASE = "https://shop.test/p/1"


class TestImages:
    def test_srcset_takes_last_candidate(self):
        html = '<img srcset="/img/product-300.jpg 300w, /img/product-800.jpg 800w">'
        assert scan_images(html, BASE) == ["https://shop.test/img/product-800.jpg"]

    def test_lazy_loading_attribute(self):
        html = '<img class="lazy" data-src="/media/photo-1.webp">'
        assert scan_images(html, BASE) == ["https://shop.test/media/photo-1.webp"]

    def test_protocol_relative_and_entities(self):
        html = '<img src="//cdn.test/gallery/1.png?w=800&amp;h=800">'
        assert scan_images(html, BASE) == ["https://cdn.test/gallery/1.png?w=800&h=800"]

    def test_data_uri_rejected(self):
        assert scan_images('<img src="data:image/png;base64,AAAA">', BASE) == []

    def test_data_uri_payload_not_split_like_srcset(self):
        html = '<img src="data:image/png;base64,R0lGODlhitemAQABAIAAAP.jpg">'
        assert scan_images(html, BASE) == []
        assert extract(html, BASE).images == []

    @pytest.mark.parametrize(
        "src",
        [
            "/static/favicon.png",
            "/ui/arrow-right.svg",
            "/img/badge-sale.jpg",
            "/img/avatar/me.jpg",
            "/assets/product-button.png",
        ],
    )
    def test_exclusion_keywords_win(self, src):
        assert not is_product_image(src)

    def test_requires_keyword_or_extension(self):
        assert is_product_image("/cdn/item/12345")
        assert is_product_image("/files/a1b2c3.JPG")
        assert not is_product_image("/tracking/pixel")

    def test_background_images(self):
        html = (
            "<div style=\"background-image: url('/media/item-1.jpg')\"></div>"
            '<div style="background-image:url(/css/pattern.svg)"></div>'
        )
        assert scan_images(html, BASE) == ["https://shop.test/media/item-1.jpg"]

    def test_seen_urls_count_toward_limit(self):
        html = "".join(f'<img src="/img/product-{i}.jpg">' for i in range(5))
        seen = ["https://cdn.test/a.jpg", "https://shop.test/img/product-0.jpg"]
        found = scan_images(html, BASE, seen=seen, limit=5)
        assert found == [
            "https://shop.test/img/product-1.jpg",
            "https://shop.test/img/product-2.jpg",
            "https://shop.test/img/product-3.jpg",
        ]

    def test_resolve_url(self):
        assert resolve_url("../x.jpg", "https://shop.test/a/b/c") == "https://shop.test/a/x.jpg"
        assert resolve_url("https://other.test/y.jpg", BASE) == "https://other.test/y.jpg"


class TestPrice:
    @pytest.mark.parametrize(
        "html,expected",
        [
            ('<span class="amount">$19.99</span>', 19.99),
            ("<p>Price: 45</p>", 45.0),
            ("<p>25 €</p>", 25.0),
            ('{"sku": "1", "price": "32.50 USD"}', 32.5),
            ('<span class="a-price-whole">129</span>', 129.0),
            ('<div data-price="75.00"></div>', 75.0),
        ],
    )
    def test_patterns(self, html, expected):
        assert regex_price(html) == expected

    def test_first_pattern_out_of_range_falls_through(self):
        assert regex_price('<p>$0</p><div data-price="12"></div>') == 12.0

    def test_no_price(self):
        assert regex_price("<p>Free returns</p>") is None


class TestBrand:
    def test_brand_label(self):
        assert text_brand("<li>Brand: Patagonia</li>", None) == "Patagonia"

    def test_by_capitalized_name_in_title(self):
        assert text_brand("<p>plain page</p>", "Linen Shirt by Studio Nicholson") == "Studio Nicholson"

    def test_manufacturer_label(self):
        assert text_brand("<td>manufacturer: Hanes</td>", None) == "Hanes"

    def test_none(self):
        assert text_brand("<p>nothing here</p>", None) is None

    def test_domain(self):
        assert domain_brand("https://www.everlane.com/products/tee") == "Everlane"
        assert domain_brand("https://x.io/") is None


class TestCategory:
    def test_url_keywords(self):
        assert keyword_category("https://shop.test/mens-jeans/123", None, None) == "bottoms"

    def test_title_keywords(self):
        assert keyword_category(BASE, "Wool Jacket", None) == "outerwear"
        assert keyword_category(BASE, "Leather Loafer", None) == "shoes"
        assert keyword_category(BASE, None, "Silk scarf with print") == "accessories"

    def test_first_category_in_order_wins(self):
        # hoodie is listed under tops and outerwear
        assert keyword_category(BASE, "Zip Hoodie", None) == "tops"

    def test_no_match(self):
        assert keyword_category(BASE, "Gift card", None) is None


class TestColor:
    def test_meta_color_normalized(self):
        assert palette_color("Navy Blue") == "navy"
        assert palette_color("Multi-Color") == "multicolor"
        assert palette_color("Chartreuse") is None

    def test_delimited_word_in_text(self):
        assert text_color("<html></html>", "Olive Cargo Pants", None) == "olive"
        assert text_color("<p>color-grey-melange</p>", None, None) == "gray"

    def test_color_at_end_of_text(self):
        assert text_color("", "Relaxed Tee", "Available in khaki") == "khaki"

    def test_no_false_positive_inside_words(self):
        assert text_color("<html></html>", "Bluetooth Redirect Speaker", None) is None


class TestSize:
    def test_labelled_size(self):
        assert regex_size("<p>Size: m</p>") == "m"

    def test_data_size_attribute(self):
        assert regex_size('<div data-size="42"></div>') == "42"

    def test_json_size(self):
        assert regex_size('{"size": "32W"}') == "32W"

    def test_too_long_rejected(self):
        assert regex_size('{"size": "One Size Fits All"}') is None

    def test_none(self):
        assert regex_size("<p>nothing</p>") is None


class TestMetaTags:
    def test_content_before_property(self):
        html = '<meta content="Reversed" property="og:title">'
        assert extract_meta_tag(html, "property", "og:title") == "Reversed"

    def test_apostrophe_inside_double_quotes(self):
        html = '<meta name="description" content="Men\'s hoodie &amp; joggers">'
        assert og_description(html) == "Men's hoodie & joggers"

    def test_product_price_does_not_match_amount_tag(self):
        html = '<meta property="product:price:amount" content="10">'
        assert extract_meta_tag(html, "property", "product:price") is None
