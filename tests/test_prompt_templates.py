"""
Unit tests for the Prompt Template Engine
"""

import pytest

from src.services.common.errors import PromptTemplateError
from src.services.prompts import (
    PromptTemplate,
    PromptTemplateEngine,
    TEMPLATE_CATALOG,
    canonicalize_marketplace,
    listing_title_limit,
    title_character_limit,
)


class TestPromptTemplateEngine:
    """Test placeholder substitution"""

    def test_renders_every_occurrence(self):
        engine = PromptTemplateEngine()

        prompt = engine.render("listing_system", {"marketplace_name": "eBay"})

        assert "expert e-commerce product content creator for eBay" in prompt
        assert "eBay's search algorithm" in prompt
        assert "{marketplace_name}" not in prompt

    def test_listing_prompt_contains_details_and_limit(self):
        engine = PromptTemplateEngine()

        prompt = engine.render(
            "listing",
            {
                "marketplace_name": "Amazon",
                "product_details": '{"product_id": "SKU-1"}',
                "character_limit": 200,
            },
        )

        assert '{"product_id": "SKU-1"}' in prompt
        assert "stay under 200 characters" in prompt
        # JSON example braces are template text, not placeholders
        assert '"search_terms": ["keyword 1"' in prompt

    def test_missing_parameter_raises(self):
        engine = PromptTemplateEngine()

        with pytest.raises(PromptTemplateError) as exc_info:
            engine.render("title", {"marketplace_name": "Etsy"})

        assert exc_info.value.details["missing"] == [
            "character_limit",
            "product_details",
            "product_type",
        ]

    def test_unknown_task_raises(self):
        with pytest.raises(PromptTemplateError):
            PromptTemplateEngine().render("does_not_exist", {})

    def test_extra_parameters_ignored(self):
        engine = PromptTemplateEngine()

        prompt = engine.render("system_brand", {"unused": "value"})

        assert prompt == TEMPLATE_CATALOG["system_brand"].text

    def test_substituted_values_are_not_rescanned(self):
        engine = PromptTemplateEngine()

        prompt = engine.render(
            "keywords",
            {"marketplace_name": "{product_details}", "product_details": "DETAILS"},
        )

        assert "SEO expert for {product_details}" in prompt
        assert "DETAILS" in prompt

    def test_rendering_is_deterministic(self):
        engine = PromptTemplateEngine()
        params = {"headers_and_samples": "prod_sku: A-1 | A-2"}

        assert engine.render("field_mapping", params) == engine.render(
            "field_mapping", params
        )

    def test_custom_catalog(self):
        template = PromptTemplate(name="greet", version="2.0", text="Hi {name}, {name}!")
        engine = PromptTemplateEngine({"greet": template})

        assert engine.tasks() == ["greet"]
        assert engine.placeholders("greet") == frozenset({"name"})
        assert engine.render("greet", {"name": "Bo"}) == "Hi Bo, Bo!"


class TestTemplateCatalog:
    """Test the built-in catalog"""

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            TEMPLATE_CATALOG["listing"] = None

    def test_expected_tasks_present(self):
        for task in [
            "listing_system",
            "listing",
            "product_type",
            "title",
            "description",
            "bullets",
            "keywords",
            "category",
            "brand",
            "field_mapping",
            "system_field_mapping",
        ]:
            assert task in TEMPLATE_CATALOG

    def test_placeholders(self):
        assert TEMPLATE_CATALOG["field_mapping"].placeholders == frozenset(
            {"headers_and_samples"}
        )
        assert TEMPLATE_CATALOG["system_field_mapping"].placeholders == frozenset()


class TestMarketplaces:
    """Test marketplace names and title limits"""

    def test_canonicalize(self):
        assert canonicalize_marketplace(" amazon ") == "Amazon"
        assert canonicalize_marketplace("EBAY") == "eBay"
        assert canonicalize_marketplace("Newegg") == "Newegg"

    def test_listing_title_limit(self):
        assert listing_title_limit("Amazon") == 200
        assert listing_title_limit("eBay") == 100

    def test_title_character_limit(self):
        assert title_character_limit("eBay") == 80
        assert title_character_limit("Etsy") == 140
        assert title_character_limit("Unknown") == 200
