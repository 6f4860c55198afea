"""
Prompt Template Engine - Static task templates with literal placeholder substitution
"""

from .engine import PromptTemplateEngine
from .models import PromptTemplate
from .templates import TEMPLATE_CATALOG
from .marketplaces import (
    MARKETPLACES,
    canonicalize_marketplace,
    listing_title_limit,
    title_character_limit,
)

__all__ = [
    "PromptTemplateEngine",
    "PromptTemplate",
    "TEMPLATE_CATALOG",
    "MARKETPLACES",
    "canonicalize_marketplace",
    "listing_title_limit",
    "title_character_limit",
]
