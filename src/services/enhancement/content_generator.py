"""
Single-task content generation
One template and one fallback call per task (title, description, bullets, ...)
"""

import json
import logging
from typing import Any, Mapping, Optional, Sequence, Type

from .models import (
    BrandSuggestions,
    BulletPointSet,
    CategorySuggestion,
    KeywordSet,
    ProductTypeAnalysis,
    TitleSuggestions,
)
from .prompt_builder import PromptBuilder
from .response_parser import ModelT, ResponseParser
from ..ingestion.models import ProductRecord
from ..llm_gateway import CancellationToken, CompletionOptions, ModelFallbackClient
from ..prompts import PromptTemplateEngine, canonicalize_marketplace, title_character_limit

logger = logging.getLogger(__name__)

MAX_SAMPLE_PRODUCTS = 5


def truncate_title(title: str, limit: int) -> str:
    """Cut at the last word boundary that fits within limit"""
    if len(title) <= limit:
        return title
    cut = title[:limit].rsplit(" ", 1)[0].rstrip(" ,-|")
    return cut or title[:limit]


class ListingContentGenerator:
    """
    Generates individual listing fields

    Every method is a whole call: backend and parse failures propagate
    (ExhaustedFallbackError, MalformedResponseError, OperationCancelledError).
    """

    def __init__(
        self,
        llm_client: Optional[ModelFallbackClient] = None,
        template_engine: Optional[PromptTemplateEngine] = None,
        preferred_model: Optional[str] = None,
    ):
        from ..common.service_factory import ServiceFactory

        self.llm_client = llm_client or ServiceFactory.get_llm_client()
        self.template_engine = template_engine or ServiceFactory.get_template_engine()
        self.preferred_model = preferred_model
        self.response_parser = ResponseParser()

        logger.debug("ListingContentGenerator initialized")

    def detect_product_type(
        self,
        sample_products: Sequence[Any],
        cancel_token: Optional[CancellationToken] = None,
    ) -> ProductTypeAnalysis:
        """
        Identify the product type from a few sample products

        Args:
            sample_products: ProductRecords or raw row mappings (first 5 used)
            cancel_token: Optional cancellation/deadline signal
        """
        samples = [
            p.model_dump(exclude_none=True) if isinstance(p, ProductRecord) else dict(p)
            for p in list(sample_products)[:MAX_SAMPLE_PRODUCTS]
        ]
        user_prompt = self.template_engine.render(
            "product_type",
            {"sample_data": json.dumps(samples, indent=2, ensure_ascii=False, default=str)},
        )
        return self._generate_model(
            "system_product_type", {}, user_prompt, ProductTypeAnalysis, cancel_token
        )

    def generate_title(
        self,
        record: ProductRecord,
        marketplace: str,
        product_type: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TitleSuggestions:
        """
        Suggest 1-3 titles within the marketplace's title limit

        Titles longer than the limit are cut at a word boundary.
        """
        marketplace_name = canonicalize_marketplace(marketplace)
        limit = title_character_limit(marketplace_name)

        user_prompt = self.template_engine.render(
            "title",
            {
                "marketplace_name": marketplace_name,
                "product_type": product_type,
                "product_details": PromptBuilder.serialize_record(record),
                "character_limit": limit,
            },
        )
        suggestions = self._generate_model(
            "system_title",
            {"marketplace_name": marketplace_name},
            user_prompt,
            TitleSuggestions,
            cancel_token,
        )

        over_limit = [t for t in suggestions.titles if len(t) > limit]
        if over_limit:
            logger.warning(
                f"[{record.product_id}] {len(over_limit)} titles over {limit} chars, truncating"
            )
            suggestions = suggestions.model_copy(
                update={"titles": [truncate_title(t, limit) for t in suggestions.titles]}
            )
        return suggestions

    def generate_description(
        self,
        record: ProductRecord,
        product_type: str,
        target_audience: str = "general consumers",
        price_tier: str = "mid-range",
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """Plain-text description (no JSON)"""
        user_prompt = self.template_engine.render(
            "description",
            {
                "product_type": product_type,
                "product_details": PromptBuilder.serialize_record(record),
                "target_audience": target_audience,
                "price_tier": price_tier,
            },
        )
        text = self.llm_client.complete(
            self.template_engine.render("system_description"),
            user_prompt,
            self.preferred_model,
            CompletionOptions(temperature=0.7, response_format="text"),
            cancel_token,
        )
        return text.strip()

    def generate_bullet_points(
        self,
        record: ProductRecord,
        marketplace: str,
        product_type: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BulletPointSet:
        marketplace_name = canonicalize_marketplace(marketplace)
        user_prompt = self.template_engine.render(
            "bullets",
            {
                "marketplace_name": marketplace_name,
                "product_type": product_type,
                "product_details": PromptBuilder.serialize_record(record),
            },
        )
        return self._generate_model(
            "system_bullets",
            {"marketplace_name": marketplace_name},
            user_prompt,
            BulletPointSet,
            cancel_token,
        )

    def generate_keywords(
        self,
        record: ProductRecord,
        marketplace: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> KeywordSet:
        marketplace_name = canonicalize_marketplace(marketplace)
        user_prompt = self.template_engine.render(
            "keywords",
            {
                "marketplace_name": marketplace_name,
                "product_details": PromptBuilder.serialize_record(record),
            },
        )
        return self._generate_model(
            "system_keywords",
            {"marketplace_name": marketplace_name},
            user_prompt,
            KeywordSet,
            cancel_token,
        )

    def suggest_category(
        self,
        record: ProductRecord,
        marketplace: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CategorySuggestion:
        marketplace_name = canonicalize_marketplace(marketplace)
        user_prompt = self.template_engine.render(
            "category",
            {
                "marketplace_name": marketplace_name,
                "product_details": PromptBuilder.serialize_record(record),
            },
        )
        return self._generate_model(
            "system_category",
            {"marketplace_name": marketplace_name},
            user_prompt,
            CategorySuggestion,
            cancel_token,
        )

    def suggest_brand(
        self,
        record: ProductRecord,
        product_type: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BrandSuggestions:
        user_prompt = self.template_engine.render(
            "brand",
            {
                "product_type": product_type,
                "product_details": PromptBuilder.serialize_record(record),
            },
        )
        return self._generate_model(
            "system_brand", {}, user_prompt, BrandSuggestions, cancel_token
        )

    def _generate_model(
        self,
        system_task: str,
        system_params: Mapping[str, Any],
        user_prompt: str,
        model: Type[ModelT],
        cancel_token: Optional[CancellationToken],
    ) -> ModelT:
        system_prompt = self.template_engine.render(system_task, system_params)
        logger.debug(f"[Generator] Requesting {model.__name__}")

        text = self.llm_client.complete(
            system_prompt,
            user_prompt,
            self.preferred_model,
            CompletionOptions(response_format="json"),
            cancel_token,
        )
        return self.response_parser.parse_model(text, model, model.__name__)
