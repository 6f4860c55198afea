"""
Data models for product ingestion
Pydantic V2 models for validation and type safety
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict


class ProductRecord(BaseModel):
    """
    A product listing with known fields plus an extension bag

    Fields that are not declared here (dimensions, color, marketplace-specific
    extras, unmapped CSV columns) are kept as extra attributes.
    """

    model_config = ConfigDict(
        extra="allow", str_strip_whitespace=True, coerce_numbers_to_str=True
    )

    product_id: str
    title: str
    description: Optional[str] = None
    bullet_points: List[str] = Field(default_factory=list)
    brand: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    images: List[str] = Field(default_factory=list)
    asin: Optional[str] = None
    sku: Optional[str] = None
    upc: Optional[str] = None
    search_terms: List[str] = Field(default_factory=list)

    @field_validator("product_id")
    @classmethod
    def product_id_not_empty(cls, v: str) -> str:
        if not v or v.strip() == "":
            raise ValueError("product_id cannot be empty")
        return v

    @property
    def extras(self) -> Dict[str, Any]:
        """Fields outside the known schema"""
        return dict(self.model_extra or {})


class ValidationIssue(BaseModel):
    """Model for a single listing validation issue"""

    severity: str  # 'ERROR', 'WARNING', 'INFO'
    field: str
    message: str
    recommendation: Optional[str] = None


class ListingValidationReport(BaseModel):
    """Marketplace readiness of one product record"""

    product_id: str
    marketplace: str
    is_valid: bool
    score: int = Field(ge=0, le=100)
    missing_fields: List[str] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "ERROR"]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "WARNING"]
