"""
Response parsing and merging for listing enhancement
Validates the model's JSON and merges it into the product record
"""

import logging
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from .config import ENHANCEABLE_FIELDS
from .models import ListingContent
from ..common.errors import MalformedResponseError
from ..ingestion.models import ProductRecord
from ..llm_gateway.response_parser import extract_json_object

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResponseParser:
    """Parses and validates model responses"""

    def __init__(self):
        logger.debug("ResponseParser initialized")

    def parse_model(self, text: str, model: Type[ModelT], context: str) -> ModelT:
        """
        Extract a JSON object from text and validate it as `model`

        Args:
            text: Raw response text
            model: Pydantic model to validate against
            context: Label used in log and error messages

        Raises:
            MalformedResponseError: No JSON object found or validation failed
        """
        parsed = extract_json_object(text)
        try:
            return model.model_validate(parsed)
        except ValidationError as e:
            logger.error(f"[{context}] Response failed validation: {e.error_count()} errors")
            raise MalformedResponseError(
                f"Response for {context} does not match {model.__name__}",
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e

    def parse_listing_content(self, text: str, product_id: str) -> ListingContent:
        """
        Parse a whole-listing enhancement response

        Args:
            text: Raw response text
            product_id: Record the response belongs to

        Returns:
            ListingContent (fields may be empty)

        Raises:
            MalformedResponseError: Invalid JSON or wrong field types
        """
        content = self.parse_model(text, ListingContent, product_id)
        if not content.non_empty_fields():
            logger.warning(f"[{product_id}] Response contained no enhanceable fields")
        return content

    def merge_into_record(
        self, record: ProductRecord, content: ListingContent
    ) -> ProductRecord:
        """
        Overwrite only the fields the model returned with content

        Args:
            record: Original record (not modified)
            content: Parsed enhancement

        Returns:
            New ProductRecord with the enhanced fields applied
        """
        updates = {
            name: value
            for name, value in content.non_empty_fields().items()
            if name in ENHANCEABLE_FIELDS
        }

        data = record.model_dump()
        data.update(updates)
        merged = ProductRecord.model_validate(data)

        logger.debug(f"[{record.product_id}] Merged fields: {sorted(updates)}")
        return merged
