import pytest
from app.core import config

SAMPLE_PRODUCT_HTML = """
<html>
<head><meta property="og:title" content="Widget | Sephora"></head>
<body>
    <a data-at="brand_name" href="/brand/acme">Acme</a>
    <span data-at="product_name">Widget</span>
    <span class="css-18jtttk"><b class="css-0">$24.00</b></span>
    <button data-at="add_to_basket_btn">Add to Basket</button>
</body>
</html>
"""

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Reset settings that tests are allowed to override"""
    original_use_mock = config.settings.USE_MOCK
    original_api_key = config.settings.SCRAPEOPS_API_KEY
    original_country = config.settings.SCRAPEOPS_COUNTRY

    config.settings.USE_MOCK = False
    config.settings.SCRAPEOPS_API_KEY = None
    config.settings.SCRAPEOPS_COUNTRY = None

    yield

    config.settings.USE_MOCK = original_use_mock
    config.settings.SCRAPEOPS_API_KEY = original_api_key
    config.settings.SCRAPEOPS_COUNTRY = original_country

@pytest.fixture
def product_html():
    return SAMPLE_PRODUCT_HTML
