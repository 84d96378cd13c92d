import logging
from dataclasses import dataclass, field
from typing import List

from app.fetch.base import FetchFn
from app.fetch.extractor import extract_product_name, extract_variants
from app.fetch.utils import strip_query
from app.schemas import BatchResultRecord, VariantResult
from app.services.batch import run_batch

logger = logging.getLogger(__name__)

@dataclass
class VariantsOutcome:
    product_name: str
    variants: List[VariantResult] = field(default_factory=list)

async def scrape_product(url: str, fetch_fn: FetchFn) -> BatchResultRecord:
    """Single-URL scrape: a one-item batch, so the record has the batch shape."""
    batch = await run_batch([url], 1, fetch_fn)
    return batch.results[0]

async def scrape_variants(url: str, fetch_fn: FetchFn) -> VariantsOutcome:
    """
    Fetch one product page and list its swatch variants.

    Variant URLs are built on the page URL with its query string removed.
    Fetch errors propagate to the caller.
    """
    markup = await fetch_fn(url)
    variants = extract_variants(markup, strip_query(url))
    product_name = extract_product_name(markup)
    logger.info("Found %d variants for %s", len(variants), url)
    return VariantsOutcome(product_name=product_name, variants=variants)
