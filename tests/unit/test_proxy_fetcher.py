import asyncio
from urllib.parse import parse_qs, urlsplit
import httpx
import pytest
from app.core import config
from app.fetch.base import FetchError
from app.fetch.proxy_fetcher import ProxyFetcher, build_proxy_url
from app.services.batch import run_batch

TARGET = "https://www.sephora.com/product/lip-oil-P480529?skuId=2556751"

def _query(url):
    return {k: v[0] for k, v in parse_qs(urlsplit(url).query).items()}

class TestBuildProxyUrl:
    """Unit tests for ScrapeOps URL construction"""

    def test_required_params(self):
        url = build_proxy_url("KEY", TARGET)

        assert url.startswith("https://proxy.scrapeops.io/v1/?")
        assert _query(url) == {"api_key": "KEY", "url": TARGET, "render_js": "true"}

    def test_country_param(self):
        assert _query(build_proxy_url("KEY", TARGET, country="us"))["country"] == "us"

    def test_target_url_is_encoded(self):
        url = build_proxy_url("KEY", TARGET)
        assert "skuId%3D2556751" in url

class TestProxyFetcher:
    """Unit tests for fetching through the proxy with a mocked transport"""

    def _fetcher(self, handler, **kwargs):
        return ProxyFetcher(api_key="KEY", transport=httpx.MockTransport(handler), **kwargs)

    def test_returns_markup(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, text="<h1>Widget</h1>")

        html = asyncio.run(self._fetcher(handler, country="us").fetch(TARGET))

        assert html == "<h1>Widget</h1>"
        params = _query(seen[0])
        assert params["url"] == TARGET
        assert params["country"] == "us"

    def test_http_error_status(self):
        fetcher = self._fetcher(lambda request: httpx.Response(502, text="bad gateway"))

        with pytest.raises(FetchError) as exc_info:
            asyncio.run(fetcher.fetch(TARGET))

        assert exc_info.value.status_code == 502
        assert "HTTP error 502" in str(exc_info.value)

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(FetchError) as exc_info:
            asyncio.run(self._fetcher(handler).fetch(TARGET))

        assert "Timeout while fetching" in str(exc_info.value)
        assert exc_info.value.url == TARGET

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError) as exc_info:
            asyncio.run(self._fetcher(handler).fetch(TARGET))

        assert "Failed to fetch" in str(exc_info.value)

    def test_shared_client_in_batch(self):
        """Test the fetcher as a context-managed fetch function for run_batch"""
        def handler(request):
            target = _query(str(request.url))["url"]
            if target.endswith("/b"):
                return httpx.Response(500)
            return httpx.Response(200, text='<span data-at="product_name">Widget</span>')

        async def go():
            async with self._fetcher(handler) as fetcher:
                return await run_batch(
                    ["https://example.com/a", "https://example.com/b", "https://example.com/c"],
                    2,
                    fetcher,
                )

        batch = asyncio.run(go())

        assert [r.success for r in batch.results] == [True, False, True]
        assert "HTTP error 500" in batch.results[1].error_message
        assert batch.results[2].extraction.name == "Widget"

    def test_mock_mode_skips_network(self):
        def handler(request):
            raise AssertionError("network should not be used in mock mode")

        config.settings.USE_MOCK = True
        html = asyncio.run(self._fetcher(handler).fetch(TARGET))

        assert "Mock Lip Oil" in html

    def test_api_key_required(self):
        with pytest.raises(ValueError):
            ProxyFetcher(api_key="")
