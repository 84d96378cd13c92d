"""
Product data extraction from rendered product page markup.

Every field is read through an ordered fallback chain: the first rule that
yields a non-empty value wins. Missing data is returned as None, never raised.
"""

import logging
import re
from typing import Callable, List, Optional, Sequence

from app.core.config import settings
from app.fetch.query import DocumentQuery, SoupQuery
from app.fetch.utils import (
    build_variant_url,
    parse_sku_from_image_url,
    strip_selected_suffix,
)
from app.schemas import ExtractionResult, VariantResult

logger = logging.getLogger(__name__)

PRICE_SELECTOR = "span.css-18jtttk > b.css-0"
ADD_TO_BASKET_SELECTOR = 'button[data-at="add_to_basket_btn"]'
ADD_TO_BASKET_TEXT = re.compile(r"add to basket", re.IGNORECASE)
# The storefront emits the marker with a trailing space; accept both spellings
SWATCH_GROUP_SELECTOR = '[data-comp="SwatchGroup "], [data-comp="SwatchGroup"]'
SWATCH_SELECTOR = 'button[data-at="swatch"], button[data-at="selected_swatch"]'

Rule = Callable[[DocumentQuery], str]

NAME_RULES: Sequence[Rule] = (
    lambda q: q.first_text('[data-at="product_name"]'),
    lambda q: q.first_attr('meta[property="og:title"]', "content"),
    lambda q: q.first_text("h1"),
)

BRAND_RULES: Sequence[Rule] = (
    lambda q: q.first_text('a[data-at="brand_name"]'),
    lambda q: q.first_text('a[href*="/brand/"]'),
)


def _first_non_empty(query: DocumentQuery, rules: Sequence[Rule]) -> Optional[str]:
    for rule in rules:
        value = rule(query)
        if value:
            return value
    return None


def detect_in_stock(query: DocumentQuery) -> bool:
    """
    Stock heuristic: an add-to-basket button OR any span reading "Add to Basket".

    Either signal alone marks the product in stock, so a page that renders the
    basket text while the button is disabled still reports True. False "in
    stock" is preferred over false "out of stock" here.
    """
    has_button = query.select_first(ADD_TO_BASKET_SELECTOR) is not None
    has_text = bool(query.contains_text("span", ADD_TO_BASKET_TEXT))
    logger.debug("Stock detection: button=%s, text=%s", has_button, has_text)
    return has_button or has_text


def extract_product(markup: str, url: str = "") -> ExtractionResult:
    """Extract price, name, brand and stock status from a product page."""
    query = SoupQuery.from_markup(markup)
    price = query.first_text(PRICE_SELECTOR) or None
    return ExtractionResult(
        url=url,
        price=price,
        in_stock=detect_in_stock(query),
        name=_first_non_empty(query, NAME_RULES),
        brand=_first_non_empty(query, BRAND_RULES),
    )


def extract_product_name(markup: str) -> str:
    """Product display name, falling back to a placeholder when the page has none."""
    query = SoupQuery.from_markup(markup)
    return _first_non_empty(query, NAME_RULES) or settings.DEFAULT_PRODUCT_NAME


def extract_variants(markup: str, base_url: str) -> List[VariantResult]:
    """
    Collect color/size variants from the swatch groups of a product page.

    Groups and swatches are walked in document order. A swatch without an
    image src, without an aria-label, or whose image URL has no sku/s<digits>
    segment is skipped. An empty list means the page has no usable variants.
    """
    query = SoupQuery.from_markup(markup)
    variants: List[VariantResult] = []

    for group in query.select_all(SWATCH_GROUP_SELECTOR):
        group_query = query.scope(group)
        for button in group_query.select_all(SWATCH_SELECTOR):
            img = group_query.scope(button).select_first("img")
            image_src = (query.attr(img, "src") or "").strip() if img is not None else ""
            label = (query.attr(button, "aria-label") or "").strip()
            if not image_src or not label:
                logger.debug("Skipping swatch without image or label")
                continue

            sku = parse_sku_from_image_url(image_src)
            if not sku:
                logger.debug("Skipping swatch, no SKU in %s", image_src)
                continue

            variants.append(
                VariantResult(
                    sku=sku,
                    name=strip_selected_suffix(label),
                    url=build_variant_url(base_url, sku),
                    image_url=image_src,
                )
            )

    return variants
