"""
Marketplace names and character limits
"""

from typing import Optional

MARKETPLACES = ["Amazon", "eBay", "Walmart", "Etsy", "Shopify"]

_CANONICAL_NAMES = {name.lower(): name for name in MARKETPLACES}

# Title limits used by the single-task title generator
TITLE_CHARACTER_LIMITS = {
    "Amazon": 200,
    "eBay": 80,
    "Walmart": 200,
    "Etsy": 140,
    "Shopify": 120,
}
DEFAULT_TITLE_CHARACTER_LIMIT = 200

# Title limit stated in the whole-listing enhancement prompt
AMAZON_LISTING_TITLE_LIMIT = 200
DEFAULT_LISTING_TITLE_LIMIT = 100


def canonicalize_marketplace(marketplace: Optional[str]) -> str:
    """'amazon ' -> 'Amazon'; unrecognized names are returned stripped"""
    name = (marketplace or "").strip()
    return _CANONICAL_NAMES.get(name.lower(), name)


def listing_title_limit(marketplace: str) -> int:
    if canonicalize_marketplace(marketplace) == "Amazon":
        return AMAZON_LISTING_TITLE_LIMIT
    return DEFAULT_LISTING_TITLE_LIMIT


def title_character_limit(marketplace: str) -> int:
    return TITLE_CHARACTER_LIMITS.get(
        canonicalize_marketplace(marketplace), DEFAULT_TITLE_CHARACTER_LIMIT
    )
