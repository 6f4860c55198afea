"""
Listing Enhancement - Batch enhancement of product listings with per-record failure isolation
"""

from .service import ListingEnhancementService, configure_logging
from .batch_processor import EnhancementOrchestrator, enhance_batch
from .content_generator import ListingContentGenerator
from .models import (
    ListingContent,
    RecordStatus,
    EnhancementResult,
    BatchResult,
    ProductTypeAnalysis,
    TitleSuggestions,
    BulletPointSet,
    KeywordSet,
    CategorySuggestion,
    BrandSuggestions,
)

__all__ = [
    "ListingEnhancementService",
    "configure_logging",
    "EnhancementOrchestrator",
    "enhance_batch",
    "ListingContentGenerator",
    "ListingContent",
    "RecordStatus",
    "EnhancementResult",
    "BatchResult",
    "ProductTypeAnalysis",
    "TitleSuggestions",
    "BulletPointSet",
    "KeywordSet",
    "CategorySuggestion",
    "BrandSuggestions",
]
