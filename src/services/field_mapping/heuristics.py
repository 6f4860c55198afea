"""
Offline keyword-based column mapping, usable without a model call
"""

import re
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .models import FieldMapping, StandardField

logger = logging.getLogger(__name__)

EXACT_MATCH_CONFIDENCE = 0.9
PARTIAL_MATCH_CONFIDENCE = 0.7

# Shorter variations only match exactly (e.g. "id" must not match "width")
MIN_PARTIAL_MATCH_LENGTH = 4

FIELD_VARIATIONS: Dict[StandardField, List[str]] = {
    StandardField.PRODUCT_ID: [
        "id", "product_id", "item_id", "product_code", "item_number", "listing_id",
    ],
    StandardField.TITLE: [
        "title", "name", "product_name", "item_name", "product_title", "listing_title",
    ],
    StandardField.DESCRIPTION: [
        "description", "desc", "product_description", "full_description", "details", "detail",
    ],
    StandardField.PRICE: [
        "price", "cost", "retail_price", "sale_price", "current_price", "msrp",
    ],
    StandardField.BRAND: ["brand", "manufacturer", "producer", "brand_name", "make"],
    StandardField.CATEGORY: [
        "category", "cat", "department", "product_category", "product_type", "type",
    ],
    StandardField.BULLET_POINTS: [
        "features", "bullet_points", "bullets", "key_features", "highlights", "key_points",
    ],
    StandardField.IMAGES: [
        "images", "image", "image_url", "picture", "photo", "product_image",
    ],
    StandardField.ASIN: ["asin"],
    StandardField.SKU: ["sku", "stock_keeping_unit", "seller_sku", "merchant_sku"],
    StandardField.UPC: ["upc", "ean", "gtin", "barcode"],
    StandardField.DIMENSIONS: ["dimensions", "dimension", "measurements"],
    StandardField.WEIGHT: ["weight", "shipping_weight", "item_weight"],
    StandardField.COLOR: ["color", "colour"],
    StandardField.SIZE: ["size"],
}


def _normalize(name: str) -> str:
    return re.sub(r"[_\s\-]", "", str(name).lower())


def _match_strength(normalized: str, variations: Sequence[str]) -> Optional[Tuple[int, int]]:
    """(exact?, matched variation length) for the best variation, None if nothing matches"""
    best = None
    for variation in variations:
        v = _normalize(variation)
        if normalized == v:
            strength = (1, len(v))
        elif len(v) >= MIN_PARTIAL_MATCH_LENGTH and v in normalized:
            strength = (0, len(v))
        else:
            continue
        if best is None or strength > best:
            best = strength
    return best


def detect_mappings_heuristically(headers: Sequence[str]) -> List[FieldMapping]:
    """
    Map headers to standard fields by name alone

    Every (header, field) pair is scored before anything is assigned, so a
    header matching a field exactly beats another header that only contains
    one of its variations. Longer variations beat shorter ones, then header
    order decides. Each standard field is claimed by at most one column.
    Exact matches score 0.9, partial matches 0.7, everything else is unmapped
    with 0.0.

    Args:
        headers: CSV column headers

    Returns:
        One FieldMapping per header, in header order
    """
    field_order = list(FIELD_VARIATIONS)
    candidates = []
    for header_idx, header in enumerate(headers):
        normalized = _normalize(header)
        for field_idx, standard_field in enumerate(field_order):
            strength = _match_strength(normalized, FIELD_VARIATIONS[standard_field])
            if strength is not None:
                candidates.append((strength, header_idx, field_idx))

    candidates.sort(key=lambda c: (-c[0][0], -c[0][1], c[1], c[2]))

    assigned: Dict[int, Tuple[StandardField, float]] = {}
    claimed = set()
    for (exact, _), header_idx, field_idx in candidates:
        standard_field = field_order[field_idx]
        if header_idx in assigned or standard_field in claimed:
            continue
        confidence = EXACT_MATCH_CONFIDENCE if exact else PARTIAL_MATCH_CONFIDENCE
        assigned[header_idx] = (standard_field, confidence)
        claimed.add(standard_field)

    mappings = []
    for header_idx, header in enumerate(headers):
        if header_idx in assigned:
            standard_field, confidence = assigned[header_idx]
            mappings.append(
                FieldMapping(
                    original_column=header,
                    standard_field=standard_field,
                    confidence=confidence,
                    notes="Matched by column name",
                )
            )
        else:
            mappings.append(
                FieldMapping(
                    original_column=header,
                    standard_field=StandardField.UNMAPPED,
                    confidence=0.0,
                    notes="No matching standard field",
                )
            )

    logger.debug(
        f"Heuristic mapping: {len(claimed)}/{len(mappings)} columns mapped"
    )
    return mappings
