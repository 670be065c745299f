"""Shared fixtures: product pages in the shapes shops actually serve."""

import httpx
import pytest

BASE_URL = "https://shop.test/p/1"


@pytest.fixture
def base_url():
    return BASE_URL


@pytest.fixture
def json_ld_page():
    """Product page with JSON-LD, Open Graph and body markup all present."""
    return """<!doctype html>
<html>
<head>
  <title>Blue Hoodie | Shop Test</title>
  <meta property="og:title" content="Hoodie - Open Graph Title">
  <meta property="og:description" content="OG description">
  <meta property="og:image" content="https://cdn.test/og-hoodie.jpg">
  <script type="application/ld+json">
  {
    "@context": "https://schema.org",
    "@type": "Product",
    "name": "Blue Hoodie",
    "description": "A cozy fleece-lined hoodie.",
    "image": ["https://cdn.test/hoodie-front.jpg", {"@type": "ImageObject", "url": "https://cdn.test/hoodie-back.jpg"}],
    "brand": {"@type": "Brand", "name": "Acme Apparel"},
    "category": "Clothing > Tops",
    "offers": {"@type": "Offer", "price": "49.99", "priceCurrency": "USD"}
  }
  </script>
</head>
<body>
  <img src="/assets/logo.png">
  <img src="/images/product-hoodie-side.jpg">
</body>
</html>"""


@pytest.fixture
def og_only_page():
    return """<html><head>
<meta property="og:title" content="Canvas Sneaker">
<meta property="og:image" content="/img/shirt.jpg">
</head><body></body></html>"""


def mock_transport(routes: dict) -> httpx.MockTransport:
    """
    Build a MockTransport from {url: response-or-exception-class}.

    Unknown URLs answer 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        target = routes.get(str(request.url))
        if isinstance(target, type) and issubclass(target, Exception):
            raise target("simulated failure", request=request)
        if target is None:
            return httpx.Response(404)
        return target

    return httpx.MockTransport(handler)


@pytest.fixture
def make_transport():
    return mock_transport
