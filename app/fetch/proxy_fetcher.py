import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.fetch.base import BaseFetcher, FetchError

logger = logging.getLogger(__name__)

def build_proxy_url(api_key: str, target_url: str, country: Optional[str] = None,
                    base_url: Optional[str] = None) -> str:
    """Build the ScrapeOps proxy URL that renders `target_url` with JavaScript enabled."""
    params = {"api_key": api_key, "url": target_url, "render_js": "true"}
    if country:
        params["country"] = country
    return f"{base_url or settings.SCRAPEOPS_BASE_URL}?{urlencode(params)}"

class ProxyFetcher(BaseFetcher):
    """
    Fetch rendered product pages through the ScrapeOps proxy.

    Use as an async context manager to share one connection pool across a
    batch; outside a context each fetch opens its own client.
    """

    def __init__(self, api_key: str, country: Optional[str] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        if not api_key:
            raise ValueError("ScrapeOps API key is required")
        self.api_key = api_key
        self.country = country
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _new_client(self) -> httpx.AsyncClient:
        headers = {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "User-Agent": settings.USER_AGENT,
        }
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers=headers,
            follow_redirects=True,
            transport=self._transport,
        )

    async def __aenter__(self) -> "ProxyFetcher":
        self._client = self._new_client()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> str:
        if settings.USE_MOCK:
            return _mock_product_html(url)

        proxy_url = build_proxy_url(self.api_key, url, self.country)
        if self._client is not None:
            return await self._get(self._client, url, proxy_url)
        async with self._new_client() as client:
            return await self._get(client, url, proxy_url)

    async def _get(self, client: httpx.AsyncClient, url: str, proxy_url: str) -> str:
        try:
            response = await client.get(proxy_url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(f"Timeout while fetching {url}", url=url) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(f"HTTP error {status} for {url}", url=url, status_code=status) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e

        logger.debug("Fetched %s (%d chars)", url, len(response.text))
        return response.text

def _mock_product_html(url: str) -> str:
    """Canned product page for running without proxy credits."""
    if "nostock" in url.lower():
        return """
        <html>
        <head><meta property="og:title" content="Mock Sold Out Serum"></head>
        <body>
            <h1>Mock Sold Out Serum</h1>
            <a href="/brand/mock-labs">Mock Labs</a>
            <span class="css-18jtttk"><b class="css-0">$48.00</b></span>
            <button data-at="notify_me_btn">Notify me</button>
        </body>
        </html>
        """

    return """
    <html>
    <head><meta property="og:title" content="Mock Lip Oil | Sephora"></head>
    <body>
        <a data-at="brand_name" href="/brand/mock-beauty">Mock Beauty</a>
        <span data-at="product_name">Mock Lip Oil</span>
        <span class="css-18jtttk"><b class="css-0">$24.00</b></span>
        <div data-comp="SwatchGroup ">
            <button data-at="selected_swatch" aria-label="Rose - Selected">
                <img src="https://www.sephora.com/productimages/sku/s2556751+sw-62.jpg">
            </button>
            <button data-at="swatch" aria-label="Berry">
                <img src="https://www.sephora.com/productimages/sku/s2556793+sw-62.jpg">
            </button>
        </div>
        <button data-at="add_to_basket_btn"><span>Add to Basket</span></button>
    </body>
    </html>
    """
