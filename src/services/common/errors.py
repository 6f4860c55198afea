"""
Exception classes shared by all listing enhancement services

All custom exceptions inherit from ListingEnhancerError so callers can
catch the whole family with one except clause.
"""

from typing import Optional, Any, List
from datetime import datetime, timezone


class ListingEnhancerError(Exception):
    """
    Base exception for all listing enhancer errors

    Attributes:
        code: Error code (e.g., "EXHAUSTED_FALLBACK")
        message: Human-readable message
        details: Additional context
    """

    code = "LISTING_ENHANCER_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        if code:
            self.code = code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to a serializable error payload"""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp,
            }
        }


class ConfigurationError(ListingEnhancerError):
    """Required configuration is missing or invalid"""

    code = "CONFIGURATION_ERROR"


class PromptTemplateError(ListingEnhancerError):
    """Unknown template or missing placeholder parameters"""

    code = "PROMPT_TEMPLATE_ERROR"


class TransientBackendError(ListingEnhancerError):
    """A single completion attempt failed (network error or non-2xx)"""

    code = "TRANSIENT_BACKEND_ERROR"

    def __init__(
        self,
        message: str,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            message, details={"model": model, "status_code": status_code}
        )
        self.model = model
        self.status_code = status_code


class MalformedResponseError(ListingEnhancerError):
    """Response arrived but lacks the expected structure"""

    code = "MALFORMED_RESPONSE"


class ExhaustedFallbackError(ListingEnhancerError):
    """Every permitted candidate model failed"""

    code = "EXHAUSTED_FALLBACK"

    def __init__(
        self,
        message: str,
        attempts: Optional[List[Any]] = None,
        last_error: Optional[BaseException] = None,
    ):
        self.attempts = list(attempts or [])
        self.last_error = last_error
        super().__init__(
            message,
            details={
                "models_tried": [a.model for a in self.attempts],
                "last_error": str(last_error) if last_error else None,
            },
        )


class OperationCancelledError(ListingEnhancerError):
    """The caller cancelled the operation or its deadline passed"""

    code = "OPERATION_CANCELLED"


class MappingInferenceError(ListingEnhancerError):
    """Field mapping inference failed as a whole"""

    code = "MAPPING_INFERENCE_FAILED"


class RecordEnhancementFailure(ListingEnhancerError):
    """Enhancement of one record failed; stored on that record's result"""

    code = "RECORD_ENHANCEMENT_FAILED"

    def __init__(self, product_id: str, message: str):
        super().__init__(message, details={"product_id": product_id})
        self.product_id = product_id
