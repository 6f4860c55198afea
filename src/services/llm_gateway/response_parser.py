"""
JSON extraction from raw LLM response text
"""

import json
import re
import logging
from typing import Any

from ..common.errors import MalformedResponseError

logger = logging.getLogger(__name__)


def extract_json_from_response(llm_response: str) -> Any:
    """
    Extract JSON from LLM response, handling various formats

    LLM might return:
    - Pure JSON: {"title": ...}
    - Markdown wrapped: ```json\\n{...}\\n```
    - Text before/after JSON

    Args:
        llm_response: Raw LLM response text

    Returns:
        Parsed JSON value

    Raises:
        MalformedResponseError: If no valid JSON found
    """
    if not isinstance(llm_response, str):
        raise MalformedResponseError("LLM response is not text")

    logger.debug(f"Extracting JSON from response ({len(llm_response)} chars)")

    # Try direct parsing first
    try:
        return json.loads(llm_response.strip())
    except json.JSONDecodeError:
        logger.debug("Direct parsing failed, trying extraction methods")

    # Try extracting from markdown code block
    match = re.search(r"```(?:json)?\s*([\[{].*?[\]}])\s*```", llm_response, re.DOTALL)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            logger.debug("Markdown extraction failed")

    # Try the outermost object in the text
    start, end = llm_response.find("{"), llm_response.rfind("}")
    if 0 <= start < end:
        try:
            return json.loads(llm_response[start : end + 1])
        except json.JSONDecodeError:
            logger.debug("Embedded object extraction failed")

    logger.error("Could not extract valid JSON from LLM response")
    raise MalformedResponseError("Could not extract valid JSON from LLM response")


def extract_json_object(llm_response: str) -> dict:
    """Like extract_json_from_response but the top-level value must be an object"""
    parsed = extract_json_from_response(llm_response)
    if not isinstance(parsed, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(parsed).__name__}"
        )
    return parsed
