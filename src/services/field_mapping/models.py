"""
Pydantic models for Field Mapping Inference
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class StandardField(str, Enum):
    """Normalized product schema fields a CSV column can map to"""

    PRODUCT_ID = "product_id"
    TITLE = "title"
    DESCRIPTION = "description"
    PRICE = "price"
    BRAND = "brand"
    CATEGORY = "category"
    BULLET_POINTS = "bullet_points"
    IMAGES = "images"
    ASIN = "asin"
    SKU = "sku"
    UPC = "upc"
    DIMENSIONS = "dimensions"
    WEIGHT = "weight"
    COLOR = "color"
    SIZE = "size"
    UNMAPPED = "unmapped"

    @classmethod
    def coerce(cls, value) -> "StandardField":
        """Known field names map to themselves, anything else to UNMAPPED"""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNMAPPED


class FieldMapping(BaseModel):
    """Association between a raw CSV column and a standard field (immutable)"""

    model_config = ConfigDict(frozen=True)

    original_column: str
    standard_field: StandardField
    confidence: float = Field(ge=0.0, le=1.0)
    notes: str = ""
