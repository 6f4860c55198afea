"""
Ingestion - CSV loading, product record model, normalization and marketplace validation
"""

from .loader import CSVLoader
from .models import ListingValidationReport, ProductRecord, ValidationIssue
from .normalizer import RecordNormalizer, apply_mappings, parse_price, split_list_value
from .validator import ListingValidator

__all__ = [
    "CSVLoader",
    "ListingValidationReport",
    "ListingValidator",
    "ProductRecord",
    "RecordNormalizer",
    "ValidationIssue",
    "apply_mappings",
    "parse_price",
    "split_list_value",
]
