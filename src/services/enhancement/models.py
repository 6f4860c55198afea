"""
Pydantic models for the Listing Enhancement Service
"""

import re
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from ..common.errors import RecordEnhancementFailure
from ..ingestion.models import ListingValidationReport, ProductRecord


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise ValueError(f"expected text, got {type(value).__name__}")
    return str(value).strip()


def _clean_list(value: Any, separator: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = re.split(separator, value)
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {type(value).__name__}")
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


class ListingContent(BaseModel):
    """Parsed model output for a whole-listing enhancement"""

    title: Optional[str] = None
    description: Optional[str] = None
    bullet_points: List[str] = Field(default_factory=list)
    search_terms: List[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return _clean_text(v)

    @field_validator("bullet_points", mode="before")
    @classmethod
    def clean_bullet_points(cls, v: Any) -> List[str]:
        return _clean_list(v, r"\r?\n")

    @field_validator("search_terms", mode="before")
    @classmethod
    def clean_search_terms(cls, v: Any) -> List[str]:
        return _clean_list(v, r",|\r?\n")

    def non_empty_fields(self) -> Dict[str, Any]:
        """Only the fields that carry content"""
        return {name: value for name, value in self.model_dump().items() if value}


class RecordStatus(str, Enum):
    ENHANCED = "enhanced"
    FAILED = "failed"


class EnhancementResult(BaseModel):
    """Outcome for one input record (immutable)"""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    record: ProductRecord
    enhanced: bool
    status: RecordStatus
    model_used: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None
    error_code: Optional[str] = None
    validation: Optional[ListingValidationReport] = None  # enhanced records only

    @property
    def product_id(self) -> str:
        return self.record.product_id

    def raise_for_failure(self) -> None:
        """Raise RecordEnhancementFailure if this record was not enhanced"""
        if not self.enhanced:
            raise RecordEnhancementFailure(self.product_id, self.error or "Enhancement failed")


class BatchResult(BaseModel):
    """Result for batch processing"""

    marketplace: str
    model: str
    total_processed: int
    successful: int
    failed: int
    success_rate: float
    cancelled: bool = False
    valid_listings: int = 0
    processing_time: float
    avg_time_per_product: float
    results: List[EnhancementResult]


# Single-task content generation outputs


class ProductTypeAnalysis(BaseModel):
    product_type: str
    category: Optional[str] = None
    subcategory: Optional[str] = None
    target_audience: str = "general consumers"
    price_tier: str = "mid-range"
    key_features: List[str] = Field(default_factory=list)
    confidence_score: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        try:
            return max(0.0, min(1.0, float(v)))
        except (TypeError, ValueError):
            return 0.0


class TitleSuggestions(BaseModel):
    titles: List[str] = Field(min_length=1)
    reasoning: Optional[str] = None

    @field_validator("titles", mode="before")
    @classmethod
    def clean_titles(cls, v: Any) -> List[str]:
        return _clean_list(v, r"\r?\n")

    @property
    def best(self) -> str:
        return self.titles[0]


class BulletPointSet(BaseModel):
    bullet_points: List[str] = Field(min_length=1)

    @field_validator("bullet_points", mode="before")
    @classmethod
    def clean_bullet_points(cls, v: Any) -> List[str]:
        return _clean_list(v, r"\r?\n")


class KeywordSet(BaseModel):
    primary_keywords: List[str] = Field(default_factory=list)
    secondary_keywords: List[str] = Field(default_factory=list)
    long_tail_keywords: List[str] = Field(default_factory=list)

    @field_validator(
        "primary_keywords", "secondary_keywords", "long_tail_keywords", mode="before"
    )
    @classmethod
    def clean_keywords(cls, v: Any) -> List[str]:
        return _clean_list(v, r",|\r?\n")

    def all_keywords(self) -> List[str]:
        """Every keyword once, primary first"""
        seen = []
        for keyword in self.primary_keywords + self.secondary_keywords + self.long_tail_keywords:
            if keyword not in seen:
                seen.append(keyword)
        return seen


class CategorySuggestion(BaseModel):
    primary_category_path: List[str] = Field(min_length=1)
    category_id: Optional[str] = None
    alternative_paths: List[List[str]] = Field(default_factory=list)
    reasoning: Optional[str] = None

    @field_validator("category_id", mode="before")
    @classmethod
    def id_as_text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @property
    def category(self) -> str:
        return " > ".join(self.primary_category_path)


class BrandOption(BaseModel):
    name: str
    rationale: Optional[str] = None
    confidence: Optional[float] = None


class BrandSuggestions(BaseModel):
    brand_suggestions: List[BrandOption] = Field(default_factory=list)
    recommended_brand: str
