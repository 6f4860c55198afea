"""
Row normalization: raw CSV rows + field mappings -> ProductRecord instances
"""

import math
import re
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .config import MIN_MAPPING_CONFIDENCE
from .models import ProductRecord
from ..field_mapping.models import FieldMapping, StandardField

logger = logging.getLogger(__name__)

LIST_FIELDS = {StandardField.BULLET_POINTS, StandardField.IMAGES}
LIST_SEPARATOR_PATTERN = re.compile(r"\r?\n|\||;")
ID_FALLBACK_FIELDS = ["sku", "asin", "upc"]
STANDARD_FIELD_NAMES = {f.value for f in StandardField}


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def _to_text(value: Any) -> str:
    # pandas reads numeric identifiers as floats (e.g. 12345.0)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_price(value: Any) -> Optional[float]:
    """'$1,299.00' -> 1299.0; unparseable values -> None"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return None if isinstance(value, float) and math.isnan(value) else float(value)

    cleaned = re.sub(r"[^0-9.\-]", "", str(value))
    try:
        return float(cleaned)
    except ValueError:
        logger.warning(f"Could not parse price: {value!r}")
        return None


def split_list_value(value: Any) -> List[str]:
    """Split newline, '|' or ';' separated text into non-empty items"""
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = LIST_SEPARATOR_PATTERN.split(str(value))
    return [_to_text(item) for item in items if not _is_empty(item)]


class RecordNormalizer:
    """Applies field mappings to raw rows"""

    def __init__(
        self,
        mappings: Sequence[FieldMapping],
        min_confidence: float = MIN_MAPPING_CONFIDENCE,
    ):
        """
        Args:
            mappings: Column mappings (from inference or heuristics)
            min_confidence: Mappings below this confidence are treated as unmapped
        """
        self.column_map: Dict[str, StandardField] = {}
        claimed = set()

        for mapping in mappings:
            if mapping.standard_field == StandardField.UNMAPPED:
                continue
            if mapping.confidence < min_confidence:
                logger.debug(
                    f"Ignoring low-confidence mapping {mapping.original_column} -> "
                    f"{mapping.standard_field.value} ({mapping.confidence:.2f})"
                )
                continue
            if mapping.standard_field in claimed:
                logger.warning(
                    f"Standard field '{mapping.standard_field.value}' already mapped, "
                    f"keeping column '{mapping.original_column}' as extra"
                )
                continue
            claimed.add(mapping.standard_field)
            self.column_map[mapping.original_column] = mapping.standard_field

        logger.debug(f"RecordNormalizer initialized ({len(self.column_map)} mapped columns)")

    def normalize_row(self, row: Mapping[str, Any], position: int) -> ProductRecord:
        """
        Build one ProductRecord from a raw row

        Args:
            row: Raw row as column -> value
            position: Zero-based row index (used for generated product IDs)

        Returns:
            ProductRecord with mapped fields and unmapped columns as extras
        """
        data: Dict[str, Any] = {}
        extras: Dict[str, Any] = {}

        for column, value in row.items():
            if _is_empty(value):
                continue

            standard_field = self.column_map.get(column)
            if standard_field is None:
                key = str(column)
                if key in ProductRecord.model_fields or key in STANDARD_FIELD_NAMES:
                    key = f"original_{key}"
                extras[key] = _to_text(value)
            elif standard_field == StandardField.PRICE:
                price = parse_price(value)
                if price is not None:
                    data["price"] = price
            elif standard_field in LIST_FIELDS:
                data[standard_field.value] = split_list_value(value)
            else:
                data[standard_field.value] = _to_text(value)

        if not data.get("product_id"):
            fallback = next((data[f] for f in ID_FALLBACK_FIELDS if data.get(f)), None)
            data["product_id"] = fallback or f"PROD-{position + 1:06d}"
            logger.debug(f"Row {position}: product_id defaulted to {data['product_id']}")

        data.setdefault("title", "")

        return ProductRecord(**extras, **data)

    def normalize_rows(self, rows: Sequence[Mapping[str, Any]]) -> List[ProductRecord]:
        records = [self.normalize_row(row, position) for position, row in enumerate(rows)]
        logger.info(f"Normalized {len(records)} rows into product records")
        return records


def apply_mappings(
    rows: Sequence[Mapping[str, Any]],
    mappings: Sequence[FieldMapping],
    min_confidence: float = MIN_MAPPING_CONFIDENCE,
) -> List[ProductRecord]:
    """
    Convenience function: normalize raw rows with the given mappings

    Args:
        rows: Raw rows as column -> value mappings
        mappings: Column mappings
        min_confidence: Mappings below this confidence are treated as unmapped

    Returns:
        One ProductRecord per row, in row order
    """
    return RecordNormalizer(mappings, min_confidence).normalize_rows(rows)
