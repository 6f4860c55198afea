"""
Field mapping inference: arbitrary CSV headers -> normalized product schema
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import FieldMapping, StandardField
from ..common.errors import (
    ExhaustedFallbackError,
    MalformedResponseError,
    MappingInferenceError,
)
from ..llm_gateway import CancellationToken, CompletionOptions, ModelFallbackClient
from ..llm_gateway.response_parser import extract_json_object
from ..prompts import PromptTemplateEngine

logger = logging.getLogger(__name__)

MAX_SAMPLES_PER_COLUMN = 3


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


class FieldMappingInference:
    """Infers FieldMappings for a CSV header set with one model call"""

    def __init__(
        self,
        llm_client: Optional[ModelFallbackClient] = None,
        template_engine: Optional[PromptTemplateEngine] = None,
        preferred_model: Optional[str] = None,
    ):
        """
        Args:
            llm_client: Fallback client (ServiceFactory default if None)
            template_engine: Template engine (ServiceFactory default if None)
            preferred_model: Model descriptor tried first
        """
        from ..common.service_factory import ServiceFactory

        self.llm_client = llm_client or ServiceFactory.get_llm_client()
        self.template_engine = template_engine or ServiceFactory.get_template_engine()
        self.preferred_model = preferred_model

        logger.debug("FieldMappingInference initialized")

    def build_headers_and_samples(
        self, headers: Sequence[str], sample_rows: Sequence[Mapping[str, Any]]
    ) -> str:
        """
        One line per header: "{header}: {s1} | {s2} | {s3}"

        Args:
            headers: CSV column headers
            sample_rows: Rows as header -> value mappings

        Returns:
            Newline-joined block of header/sample lines
        """
        lines = []
        for header in headers:
            samples = []
            for row in sample_rows:
                value = row.get(header)
                if _is_empty(value):
                    continue
                samples.append(str(value).strip())
                if len(samples) == MAX_SAMPLES_PER_COLUMN:
                    break
            lines.append(f"{header}: {' | '.join(samples)}")
        return "\n".join(lines)

    def infer_mappings(
        self,
        headers: Sequence[str],
        sample_rows: Sequence[Mapping[str, Any]],
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[FieldMapping]:
        """
        Ask the model how each column maps to the standard schema

        Args:
            headers: CSV column headers
            sample_rows: A few rows used as examples
            cancel_token: Optional cancellation/deadline signal

        Returns:
            One FieldMapping per header, in header order

        Raises:
            MappingInferenceError: All models failed or the response was unusable
        """
        # Rows are keyed by the original headers, so sample before stringifying
        headers_and_samples = self.build_headers_and_samples(headers, sample_rows)
        headers = [str(h) for h in headers]
        logger.info(
            f"Inferring field mappings for {len(headers)} columns "
            f"({len(sample_rows)} sample rows)"
        )

        user_prompt = self.template_engine.render(
            "field_mapping", {"headers_and_samples": headers_and_samples}
        )
        system_prompt = self.template_engine.render("system_field_mapping")

        try:
            response = self.llm_client.complete(
                system_prompt,
                user_prompt,
                self.preferred_model,
                CompletionOptions(response_format="json"),
                cancel_token,
            )
        except ExhaustedFallbackError as e:
            logger.error(f"Field mapping inference failed: {e}")
            raise MappingInferenceError(
                f"Field mapping inference failed: {e.message}",
                details={"models_tried": e.details.get("models_tried")},
            ) from e

        try:
            mappings = self.parse_mappings(response, headers)
        except MalformedResponseError as e:
            logger.error(f"Unusable field mapping response: {e}")
            raise MappingInferenceError(
                f"Unusable field mapping response: {e.message}"
            ) from e

        mapped = sum(1 for m in mappings if m.standard_field != StandardField.UNMAPPED)
        logger.info(f"Field mapping complete: {mapped}/{len(mappings)} columns mapped")
        return mappings

    def parse_mappings(self, response: str, headers: Sequence[str]) -> List[FieldMapping]:
        """
        Validate the raw model output into FieldMappings

        Unknown standard fields become "unmapped", confidence is clamped to
        [0, 1], entries for unknown or duplicate columns are dropped, and
        headers the model skipped are returned as unmapped.

        Raises:
            MalformedResponseError: Not JSON or no column_mappings array
        """
        parsed = extract_json_object(response)
        entries = parsed.get("column_mappings")
        if not isinstance(entries, list):
            raise MalformedResponseError("Response has no column_mappings array")

        by_column: Dict[str, FieldMapping] = {}
        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning(f"Skipping non-object mapping entry: {entry!r}")
                continue

            column = entry.get("original_column")
            if column not in headers:
                logger.warning(f"Skipping mapping for unknown column: {column!r}")
                continue
            if column in by_column:
                logger.warning(f"Duplicate mapping for column '{column}', keeping first")
                continue

            standard_field = StandardField.coerce(entry.get("standard_field"))
            if standard_field == StandardField.UNMAPPED and entry.get("standard_field") != "unmapped":
                logger.warning(
                    f"Column '{column}': unrecognized standard field "
                    f"{entry.get('standard_field')!r}, using unmapped"
                )

            by_column[column] = FieldMapping(
                original_column=column,
                standard_field=standard_field,
                confidence=self._coerce_confidence(entry.get("confidence"), column),
                notes=str(entry.get("notes") or ""),
            )

        mappings = []
        for header in headers:
            if header in by_column:
                mappings.append(by_column[header])
            else:
                logger.debug(f"Column '{header}' not mapped by model")
                mappings.append(
                    FieldMapping(
                        original_column=header,
                        standard_field=StandardField.UNMAPPED,
                        confidence=0.0,
                        notes="No mapping returned by model",
                    )
                )
        return mappings

    def _coerce_confidence(self, value: Any, column: str) -> float:
        try:
            score = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Column '{column}': invalid confidence {value!r}, using 0.0")
            return 0.0
        if math.isnan(score):
            return 0.0
        if not 0.0 <= score <= 1.0:
            logger.warning(
                f"Column '{column}': confidence {score} out of range, clamping to [0, 1]"
            )
        return max(0.0, min(1.0, score))
