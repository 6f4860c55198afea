"""
Unit tests for Field Mapping Inference and row normalization
"""

import json
import pytest
from unittest.mock import Mock

from src.services.common.errors import (
    ExhaustedFallbackError,
    MalformedResponseError,
    MappingInferenceError,
)
from src.services.field_mapping import (
    FieldMapping,
    FieldMappingInference,
    StandardField,
    detect_mappings_heuristically,
)
from src.services.prompts import PromptTemplateEngine


def mapping_response(*entries):
    return json.dumps({"column_mappings": list(entries)})


@pytest.fixture
def llm():
    """Fallback client stub; set llm.complete.return_value per test"""
    return Mock()


@pytest.fixture
def inference(llm):
    return FieldMappingInference(llm_client=llm, template_engine=PromptTemplateEngine())


# ============= TEST MODEL-BASED INFERENCE =============


class TestFieldMappingInference:
    """Test mapping inference from a model response"""

    def test_prod_sku_maps_to_sku(self, inference, llm):
        llm.complete.return_value = mapping_response(
            {"original_column": "prod_sku", "standard_field": "sku", "confidence": 0.9}
        )

        mappings = inference.infer_mappings(
            ["prod_sku"], [{"prod_sku": "A-1"}, {"prod_sku": "A-2"}]
        )

        assert mappings == [
            FieldMapping(
                original_column="prod_sku",
                standard_field=StandardField.SKU,
                confidence=0.9,
            )
        ]

    def test_unknown_standard_field_coerced_to_unmapped(self, inference, llm):
        llm.complete.return_value = mapping_response(
            {"original_column": "foo", "standard_field": "foobar", "confidence": 0.8}
        )

        mappings = inference.infer_mappings(["foo"], [{"foo": "x"}])

        assert mappings[0].standard_field == StandardField.UNMAPPED
        assert mappings[0].confidence == 0.8

    def test_confidence_clamped(self, inference, llm):
        llm.complete.return_value = mapping_response(
            {"original_column": "a", "standard_field": "title", "confidence": 1.7},
            {"original_column": "b", "standard_field": "brand", "confidence": -2},
            {"original_column": "c", "standard_field": "price", "confidence": "high"},
        )

        mappings = inference.infer_mappings(["a", "b", "c"], [])

        assert [m.confidence for m in mappings] == [1.0, 0.0, 0.0]

    def test_output_follows_header_order_and_fills_gaps(self, inference, llm):
        llm.complete.return_value = mapping_response(
            {"original_column": "Name", "standard_field": "title", "confidence": 0.95},
            {"original_column": "Ghost", "standard_field": "brand", "confidence": 0.9},
            {"original_column": "Name", "standard_field": "description", "confidence": 0.5},
        )

        mappings = inference.infer_mappings(["Cost", "Name"], [])

        assert [m.original_column for m in mappings] == ["Cost", "Name"]
        assert mappings[0].standard_field == StandardField.UNMAPPED
        assert mappings[0].confidence == 0.0
        assert mappings[1].standard_field == StandardField.TITLE

    def test_prompt_contains_headers_and_samples(self, inference, llm):
        llm.complete.return_value = mapping_response()
        rows = [
            {"prod_sku": "A-1", "Name": "Chair"},
            {"prod_sku": "", "Name": "Desk"},
            {"prod_sku": "A-3", "Name": None},
            {"prod_sku": "A-4", "Name": "Lamp"},
            {"prod_sku": "A-5", "Name": "Rug"},
        ]

        inference.infer_mappings(["prod_sku", "Name"], rows)

        system_prompt, user_prompt = llm.complete.call_args.args[:2]
        assert "prod_sku: A-1 | A-3 | A-4" in user_prompt
        assert "Name: Chair | Desk | Lamp" in user_prompt
        assert "JSON" in system_prompt
        assert llm.complete.call_args.args[3].response_format == "json"

    def test_non_string_headers_still_find_samples(self, inference, llm):
        llm.complete.return_value = mapping_response(
            {"original_column": "0", "standard_field": "sku", "confidence": 0.8},
        )
        rows = [{0: "A-1", 1: "Chair"}, {0: "A-2", 1: "Desk"}]

        mappings = inference.infer_mappings([0, 1], rows)

        user_prompt = llm.complete.call_args.args[1]
        assert "0: A-1 | A-2" in user_prompt
        assert "1: Chair | Desk" in user_prompt
        assert mappings[0].original_column == "0"
        assert mappings[0].standard_field == StandardField.SKU

    def test_missing_column_mappings_raises(self, inference, llm):
        llm.complete.return_value = json.dumps({"mappings": []})

        with pytest.raises(MappingInferenceError) as exc_info:
            inference.infer_mappings(["a"], [])

        assert isinstance(exc_info.value.__cause__, MalformedResponseError)

    def test_backend_exhaustion_raises(self, inference, llm):
        llm.complete.side_effect = ExhaustedFallbackError("all failed")

        with pytest.raises(MappingInferenceError):
            inference.infer_mappings(["a"], [])

    def test_mock_mode_end_to_end(self, mock_llm_mode):
        """Factory-provided client in mock mode returns no mappings"""
        mappings = FieldMappingInference().infer_mappings(["x"], [{"x": 1}])

        assert mappings[0].standard_field == StandardField.UNMAPPED


# ============= TEST HEURISTIC MAPPING =============


class TestHeuristicMapping:
    """Test offline name-based mapping"""

    def test_exact_and_partial_matches(self):
        mappings = detect_mappings_heuristically(
            ["Product Name", "seller_sku", "Item Weight (lbs)", "foobar"]
        )

        assert [(m.standard_field, m.confidence) for m in mappings] == [
            (StandardField.TITLE, 0.9),
            (StandardField.SKU, 0.9),
            (StandardField.WEIGHT, 0.7),
            (StandardField.UNMAPPED, 0.0),
        ]

    def test_field_claimed_once(self):
        mappings = detect_mappings_heuristically(["title", "name"])

        assert mappings[0].standard_field == StandardField.TITLE
        assert mappings[1].standard_field == StandardField.UNMAPPED

    def test_exact_header_beats_earlier_partial_match(self):
        """'Brand Name' contains 'name' but must not take title from 'Title'"""
        mappings = detect_mappings_heuristically(["Brand Name", "Title"])

        assert [(m.original_column, m.standard_field, m.confidence) for m in mappings] == [
            ("Brand Name", StandardField.BRAND, 0.9),
            ("Title", StandardField.TITLE, 0.9),
        ]

    def test_longest_partial_variation_wins(self):
        mappings = detect_mappings_heuristically(["Item Weight Info", "Weight Class"])

        assert mappings[0].standard_field == StandardField.WEIGHT
        assert mappings[1].standard_field == StandardField.UNMAPPED

    def test_short_variation_does_not_partially_match(self):
        mappings = detect_mappings_heuristically(["width"])

        assert mappings[0].standard_field == StandardField.UNMAPPED


class TestStandardField:
    """Test schema field coercion"""

    def test_coerce(self):
        assert StandardField.coerce("SKU") == StandardField.SKU
        assert StandardField.coerce("foobar") == StandardField.UNMAPPED
        assert StandardField.coerce(None) == StandardField.UNMAPPED

    def test_mapping_confidence_bounds(self):
        with pytest.raises(ValueError):
            FieldMapping(
                original_column="a", standard_field=StandardField.SKU, confidence=1.5
            )
