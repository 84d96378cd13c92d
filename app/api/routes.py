from typing import Optional
from fastapi import APIRouter, HTTPException, status
from app.core.config import settings
from app.fetch.base import FetchError
from app.fetch.proxy_fetcher import ProxyFetcher
from app.schemas import (
    BatchResult,
    BatchScrapeRequest,
    ScrapeRequest,
    ScrapeResponse,
    VariantsResponse,
)
from app.services.batch import BatchInputError, run_batch
from app.services.scrape import scrape_product, scrape_variants

router = APIRouter()

NO_VARIANTS_MESSAGE = "No variants found for this product"

def get_fetcher(api_key: Optional[str], country: Optional[str]) -> ProxyFetcher:
    """Proxy fetcher for a request; the key and country fall back to settings."""
    key = api_key or settings.SCRAPEOPS_API_KEY
    if not key and settings.USE_MOCK:
        key = "mock"
    if not key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing apiKey"
        )
    return ProxyFetcher(api_key=key, country=country or settings.SCRAPEOPS_COUNTRY)

def _require_http_url(url: str):
    if not url or not url.startswith(("http://", "https://")):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL must start with http:// or https://"
        )

def _unexpected(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e) or e.__class__.__name__
    )

@router.post("/api/scrape", response_model=ScrapeResponse)
async def scrape(request: ScrapeRequest):
    """
    Scrape price, stock, name and brand from a single product page.
    """
    _require_http_url(request.url)
    fetcher = get_fetcher(request.api_key, request.country)

    try:
        async with fetcher:
            record = await scrape_product(request.url, fetcher)
    except Exception as e:
        raise _unexpected(e)

    if not record.success:
        raise HTTPException(
            status_code=record.status_code or status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Scrape failed", "details": record.error_message}
        )

    extraction = record.extraction
    return ScrapeResponse(
        price=extraction.price,
        in_stock=extraction.in_stock,
        name=extraction.name,
        brand=extraction.brand,
        source_url=request.url,
    )

@router.post("/api/scrape/batch", response_model=BatchResult)
async def scrape_batch(request: BatchScrapeRequest):
    """
    Scrape many product pages with a bounded number of concurrent fetches.

    Results come back in the order of `urls`; failed URLs are reported per
    record and do not fail the request.
    """
    if not request.urls:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing urls array"
        )
    fetcher = get_fetcher(request.api_key, request.country)

    try:
        async with fetcher:
            return await run_batch(
                request.urls,
                request.concurrency,
                fetcher,
                deadline=request.deadline,
            )
    except BatchInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        raise _unexpected(e)

@router.post("/api/scrape/variants", response_model=VariantsResponse)
async def scrape_product_variants(request: ScrapeRequest):
    """List the color/size variants of a product page."""
    _require_http_url(request.url)
    fetcher = get_fetcher(request.api_key, request.country)

    try:
        async with fetcher:
            outcome = await scrape_variants(request.url, fetcher)
    except FetchError as e:
        raise HTTPException(
            status_code=e.status_code or status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Scrape variants failed", "details": e.message}
        )
    except Exception as e:
        raise _unexpected(e)

    if not outcome.variants:
        return VariantsResponse(
            success=False,
            error=NO_VARIANTS_MESSAGE,
            variants=[],
            product_name=outcome.product_name,
        )

    return VariantsResponse(
        success=True,
        variants=outcome.variants,
        product_name=outcome.product_name,
        total=len(outcome.variants),
    )

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"ok": True}
