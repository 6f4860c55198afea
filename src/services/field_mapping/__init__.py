"""
Field Mapping Inference - Maps arbitrary CSV headers onto the standard product schema
"""

from .inference import FieldMappingInference
from .heuristics import detect_mappings_heuristically
from .models import FieldMapping, StandardField

__all__ = [
    "FieldMappingInference",
    "detect_mappings_heuristically",
    "FieldMapping",
    "StandardField",
]
