"""
LLM Gateway - Chat completion access with model fallback and backoff
"""

from .api_client import ModelFallbackClient, resolve_model
from .cancellation import CancellationToken
from .models import (
    CompletionOptions,
    CompletionRequest,
    CompletionAttempt,
    CompletionResult,
)

__all__ = [
    "ModelFallbackClient",
    "resolve_model",
    "CancellationToken",
    "CompletionOptions",
    "CompletionRequest",
    "CompletionAttempt",
    "CompletionResult",
]
