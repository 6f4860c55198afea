"""
Prompt construction for listing enhancement
Renders the listing templates with a serialized product record
"""

import json
import logging
from typing import Any, Dict, Optional

from ..ingestion.models import ProductRecord
from ..prompts import PromptTemplateEngine, canonicalize_marketplace, listing_title_limit

logger = logging.getLogger(__name__)


class PromptBuilder:
    """Build prompts for whole-listing enhancement calls"""

    def __init__(self, template_engine: Optional[PromptTemplateEngine] = None):
        """
        Initialize Prompt builder

        Args:
            template_engine: Engine holding the listing templates
        """
        self.template_engine = template_engine or PromptTemplateEngine()
        logger.debug("PromptBuilder initialized")

    def build_system_prompt(self, marketplace: str) -> str:
        return self.template_engine.render(
            "listing_system",
            {"marketplace_name": canonicalize_marketplace(marketplace)},
        )

    def build_user_prompt(self, record: ProductRecord, marketplace: str) -> str:
        """
        Build user prompt for one record

        Args:
            record: Product record to enhance
            marketplace: Target marketplace name

        Returns:
            Prompt with the record as indented JSON and the title limit
        """
        marketplace_name = canonicalize_marketplace(marketplace)
        params: Dict[str, Any] = {
            "marketplace_name": marketplace_name,
            "product_details": self.serialize_record(record),
            "character_limit": listing_title_limit(marketplace_name),
        }
        prompt = self.template_engine.render("listing", params)

        logger.debug(f"Built prompt for {record.product_id} ({len(prompt)} chars)")
        return prompt

    @staticmethod
    def serialize_record(record: ProductRecord) -> str:
        return json.dumps(
            record.model_dump(exclude_none=True), indent=2, ensure_ascii=False, default=str
        )
