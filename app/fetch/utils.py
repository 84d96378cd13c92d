import re
from typing import Optional
from urllib.parse import parse_qs, urlsplit, urlunsplit

# Image URLs carry the variant id as ".../sku/s2556751+sw-62.jpg"
SKU_IMAGE_PATTERN = re.compile(r"sku/s(\d+)")
SKU_QUERY_KEY = "skuId"
SELECTED_SUFFIX_PATTERN = re.compile(r"\s*-\s*Selected$")

def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace (including nbsp) to single spaces and strip."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()

def parse_sku_from_image_url(image_url: Optional[str]) -> Optional[str]:
    """
    Pull the SKU id out of a swatch image URL.
    Examples: '.../productimages/sku/s2556751+sw-62.jpg' -> '2556751', '/img/foo.jpg' -> None
    """
    if not image_url:
        return None
    match = SKU_IMAGE_PATTERN.search(image_url)
    return match.group(1) if match else None

def sku_id_from_url(url: Optional[str]) -> Optional[str]:
    """
    Read the skuId query parameter of a product URL.
    Only all-digit values count; anything else is treated as no SKU.
    """
    if not url:
        return None
    values = parse_qs(urlsplit(url).query).get(SKU_QUERY_KEY)
    if not values:
        return None
    value = values[0].strip()
    return value if value.isdigit() else None

def strip_query(url: str) -> str:
    """Product URL without its query string and fragment."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))

def build_variant_url(base_url: str, sku: str) -> str:
    return f"{base_url}?{SKU_QUERY_KEY}={sku}"

def strip_selected_suffix(label: str) -> str:
    """
    Drop the ' - Selected' marker the active swatch carries in its label.
    Examples: 'Rose - Selected' -> 'Rose', 'Rose-Selected' -> 'Rose', 'Rose - selected' unchanged
    """
    return SELECTED_SUFFIX_PATTERN.sub("", label.strip())
