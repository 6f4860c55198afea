"""
Batch processing logic for listing enhancement
Runs each record through prompt -> fallback client -> parse -> merge, isolating failures
"""

import time
import logging
from typing import List, Optional, Sequence

from .models import BatchResult, EnhancementResult, RecordStatus
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser
from .config import CANCELLED_MESSAGE, DEFAULT_MARKETPLACE, DEFAULT_MODEL_PREFERENCE
from ..common.errors import ListingEnhancerError, OperationCancelledError
from ..ingestion.models import ProductRecord
from ..ingestion.validator import ListingValidator
from ..llm_gateway import (
    CancellationToken,
    CompletionOptions,
    ModelFallbackClient,
    resolve_model,
)
from ..prompts import PromptTemplateEngine, canonicalize_marketplace

logger = logging.getLogger(__name__)


class EnhancementOrchestrator:
    """Enhances batches of product records, one record at a time"""

    def __init__(
        self,
        llm_client: Optional[ModelFallbackClient] = None,
        template_engine: Optional[PromptTemplateEngine] = None,
    ):
        """
        Initialize orchestrator

        Args:
            llm_client: Fallback client (ServiceFactory default if None)
            template_engine: Template engine (ServiceFactory default if None)
        """
        from ..common.service_factory import ServiceFactory

        self.llm_client = llm_client or ServiceFactory.get_llm_client()
        self.template_engine = template_engine or ServiceFactory.get_template_engine()

        self.prompt_builder = PromptBuilder(self.template_engine)
        self.response_parser = ResponseParser()
        self.validator = ListingValidator()

        logger.info("EnhancementOrchestrator initialized")

    def enhance_batch(
        self,
        records: Sequence[ProductRecord],
        marketplace: str = DEFAULT_MARKETPLACE,
        model_preference: Optional[str] = DEFAULT_MODEL_PREFERENCE,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[EnhancementResult]:
        """Results only; see process_batch"""
        return self.process_batch(
            records, marketplace, model_preference, cancel_token
        ).results

    def process_batch(
        self,
        records: Sequence[ProductRecord],
        marketplace: str = DEFAULT_MARKETPLACE,
        model_preference: Optional[str] = DEFAULT_MODEL_PREFERENCE,
        cancel_token: Optional[CancellationToken] = None,
    ) -> BatchResult:
        """
        Enhance every record in input order

        A failing record yields a failed result and the loop continues. Once
        the cancel token fires, no further requests are issued and the
        remaining records are returned as failed.

        Args:
            records: Product records to enhance
            marketplace: Target marketplace name
            model_preference: Model alias tried first (unknown -> default model)
            cancel_token: Optional cancellation/deadline signal

        Returns:
            BatchResult with exactly one result per input record, in order
        """
        marketplace = canonicalize_marketplace(marketplace)
        model = resolve_model(model_preference)

        logger.info(
            f"Starting enhancement of {len(records)} records "
            f"(marketplace={marketplace}, model={model})"
        )

        system_prompt = self.prompt_builder.build_system_prompt(marketplace)

        results: List[EnhancementResult] = []
        successful = 0
        failed = 0
        cancelled = False

        start_time = time.time()

        for idx, record in enumerate(records, 1):
            if cancelled or (cancel_token is not None and cancel_token.cancelled):
                cancelled = True
                results.append(self._cancelled_result(record))
                failed += 1
                continue

            logger.info(f"Processing [{idx}/{len(records)}]: {record.product_id}")

            try:
                result = self.enhance_record(
                    record, marketplace, model, system_prompt, cancel_token
                )
            except OperationCancelledError:
                logger.warning(
                    f"Enhancement cancelled at record {record.product_id}, "
                    f"{len(records) - idx + 1} records left unprocessed"
                )
                cancelled = True
                result = self._cancelled_result(record)
            except Exception as e:
                logger.error(f"Failed {record.product_id}: {str(e)}")
                result = self._failed_result(record, e)

            if result.enhanced:
                successful += 1
            else:
                failed += 1
            results.append(result)

        processing_time = time.time() - start_time
        total = len(records)
        valid_listings = sum(1 for r in results if r.validation and r.validation.is_valid)

        batch_result = BatchResult(
            marketplace=marketplace,
            model=model,
            total_processed=total,
            successful=successful,
            failed=failed,
            success_rate=successful / total if total else 0,
            cancelled=cancelled,
            valid_listings=valid_listings,
            processing_time=processing_time,
            avg_time_per_product=processing_time / total if total else 0,
            results=results,
        )

        logger.info(
            f"Batch complete: {successful}/{total} successful, ({batch_result.success_rate:.1%})"
        )
        if cancelled:
            logger.warning("Batch was cancelled before all records were processed")

        return batch_result

    def enhance_record(
        self,
        record: ProductRecord,
        marketplace: str,
        model: str,
        system_prompt: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> EnhancementResult:
        """
        Enhance one record

        Raises:
            ExhaustedFallbackError: Every candidate model failed
            MalformedResponseError: The response could not be parsed
            OperationCancelledError: The cancel token fired
        """
        system_prompt = system_prompt or self.prompt_builder.build_system_prompt(marketplace)
        user_prompt = self.prompt_builder.build_user_prompt(record, marketplace)

        completion = self.llm_client.complete_with_details(
            system_prompt,
            user_prompt,
            model,
            CompletionOptions(response_format="json"),
            cancel_token,
        )

        content = self.response_parser.parse_listing_content(
            completion.text, record.product_id
        )
        merged = self.response_parser.merge_into_record(record, content)
        validation = self.validator.validate(merged, marketplace)

        logger.info(f"Enhanced {record.product_id} with {completion.model}")
        if not validation.is_valid:
            logger.warning(
                f"[{record.product_id}] Listing not ready for {marketplace}: "
                f"score={validation.score}, missing={validation.missing_fields}"
            )

        return EnhancementResult(
            record=merged,
            enhanced=True,
            status=RecordStatus.ENHANCED,
            model_used=completion.model,
            validation=validation,
        )

    def _failed_result(self, record: ProductRecord, error: Exception) -> EnhancementResult:
        if isinstance(error, ListingEnhancerError):
            message, code = error.message, error.code
        else:
            message, code = f"{type(error).__name__}: {error}", "UNEXPECTED_ERROR"

        # Detached copy; later changes to the caller's record must not leak in
        return EnhancementResult(
            record=record.model_copy(deep=True),
            enhanced=False,
            status=RecordStatus.FAILED,
            error=message,
            error_code=code,
        )

    def _cancelled_result(self, record: ProductRecord) -> EnhancementResult:
        return self._failed_result(record, OperationCancelledError(CANCELLED_MESSAGE))


def enhance_batch(
    records: Sequence[ProductRecord],
    marketplace: str = DEFAULT_MARKETPLACE,
    model_preference: Optional[str] = DEFAULT_MODEL_PREFERENCE,
    cancel_token: Optional[CancellationToken] = None,
) -> List[EnhancementResult]:
    """
    Convenience function: enhance a batch with the default orchestrator

    Args:
        records: Product records to enhance
        marketplace: Target marketplace name
        model_preference: Model alias tried first (unknown -> default model)
        cancel_token: Optional cancellation/deadline signal

    Returns:
        One EnhancementResult per record, in input order
    """
    from ..common.service_factory import ServiceFactory

    return ServiceFactory.get_orchestrator().enhance_batch(
        records, marketplace, model_preference, cancel_token
    )
