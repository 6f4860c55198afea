"""
Model fallback client for the LLM Gateway
Sends one chat completion per candidate model with exponential backoff between attempts
"""

import json
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

try:
    import openai
    from openai import OpenAI
except ImportError:
    raise ImportError("openai package required. Install with: pip install openai")

from .cancellation import CancellationToken
from .config import (
    LLM_API_KEY,
    LLM_BASE_URL,
    LLM_APP_URL,
    LLM_APP_TITLE,
    LLM_TIMEOUT,
    DEFAULT_MODEL,
    FALLBACK_MODELS,
    MAX_RETRIES,
    RETRY_DELAY_MS,
    RETRY_EXPONENTIAL_BASE,
    MOCK_LLM,
    MODEL_ALIASES,
    REQUEST_WORKERS,
    CANCEL_POLL_INTERVAL,
)
from .models import (
    CompletionAttempt,
    CompletionOptions,
    CompletionRequest,
    CompletionResult,
)
from ..common.errors import (
    ConfigurationError,
    ExhaustedFallbackError,
    MalformedResponseError,
    OperationCancelledError,
    TransientBackendError,
)

logger = logging.getLogger(__name__)


def resolve_model(model_preference: Optional[str] = "gpt4o") -> str:
    """Map a short alias (gpt4o, claude, ...) to a model descriptor, unknown -> default"""
    alias = (model_preference or "").strip().lower()
    if alias not in MODEL_ALIASES:
        logger.debug(f"Unknown model preference '{model_preference}', using {DEFAULT_MODEL}")
    return MODEL_ALIASES.get(alias, DEFAULT_MODEL)


class ModelFallbackClient:
    """Chat completion client that falls back across an ordered list of models"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = LLM_BASE_URL,
        fallback_models: Optional[List[str]] = None,
        max_retries: int = MAX_RETRIES,
        retry_delay_ms: int = RETRY_DELAY_MS,
        timeout: float = LLM_TIMEOUT,
        mock_mode: Optional[bool] = None,
        client: Optional[OpenAI] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the fallback client

        Args:
            api_key: Backend API key (uses config default if not provided)
            base_url: Base URL of the OpenAI-compatible backend
            fallback_models: Ordered fallback list (uses config default if None)
            max_retries: Upper bound on attempts per call
            retry_delay_ms: Base backoff delay in milliseconds
            timeout: Per-request timeout in seconds
            mock_mode: Return canned responses instead of calling the backend
            client: Pre-built OpenAI client (skips construction and key check)
            sleep: Function used to wait between attempts

        Raises:
            ConfigurationError: If no API key is available or max_retries < 1
        """
        if max_retries < 1:
            raise ConfigurationError(f"max_retries must be at least 1, got {max_retries}")

        self.api_key = api_key or LLM_API_KEY
        self.base_url = base_url
        self.fallback_models = list(
            FALLBACK_MODELS if fallback_models is None else fallback_models
        )
        self.max_retries = max_retries
        self.retry_delay_ms = retry_delay_ms
        self.timeout = timeout
        self.mock_mode = MOCK_LLM if mock_mode is None else mock_mode
        self._sleep = sleep
        self._request_pool: Optional[ThreadPoolExecutor] = None

        if client is not None:
            self.client = client
            logger.info("Fallback client initialized with injected backend client")
        elif not self.mock_mode:
            if not self.api_key:
                raise ConfigurationError(
                    "LLM API key is required. Set OPENROUTER_API_KEY environment variable "
                    "(or MOCK_LLM=true for testing)."
                )

            # SDK-level retries are disabled; the candidate list is the only retry
            self.client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                default_headers={
                    "HTTP-Referer": LLM_APP_URL,
                    "X-Title": LLM_APP_TITLE,
                },
            )
            logger.info(
                f"Fallback client initialized (base_url={self.base_url}, "
                f"fallbacks={self.fallback_models})"
            )
        else:
            self.client = None
            logger.warning("Fallback client in MOCK MODE - using mock responses")

    def build_candidates(self, preferred_model: Optional[str] = None) -> List[str]:
        """Preferred model first, then the fallback list; each model appears once"""
        preferred = preferred_model or DEFAULT_MODEL
        return list(dict.fromkeys([preferred, *self.fallback_models]))

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        preferred_model: Optional[str] = None,
        options: Optional[CompletionOptions] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """
        Return the text of the first successful completion

        Raises:
            ExhaustedFallbackError: If every permitted candidate failed
            OperationCancelledError: If the token was cancelled or expired
        """
        return self.complete_with_details(
            system_prompt, user_prompt, preferred_model, options, cancel_token
        ).text

    def complete_with_details(
        self,
        system_prompt: str,
        user_prompt: str,
        preferred_model: Optional[str] = None,
        options: Optional[CompletionOptions] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CompletionResult:
        """
        Try candidate models in order until one answers

        Args:
            system_prompt: System instructions
            user_prompt: User message
            preferred_model: Model tried first (default model if None)
            options: Temperature, max tokens and response format
            cancel_token: Optional cancellation/deadline signal

        Returns:
            CompletionResult with the text, the answering model and all attempts

        Raises:
            ExhaustedFallbackError: If every permitted candidate failed
            OperationCancelledError: If the token was cancelled or expired
        """
        options = options or CompletionOptions()
        candidates = self.build_candidates(preferred_model)
        max_attempts = min(len(candidates), self.max_retries)

        attempts: List[CompletionAttempt] = []
        last_error: Optional[Exception] = None

        for index in range(max_attempts):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            request = CompletionRequest(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                model=candidates[index],
                temperature=options.temperature,
                max_tokens=options.max_tokens,
                response_format=options.response_format,
            )

            logger.info(
                f"[Fallback] Calling model {request.model} "
                f"(attempt {index + 1} of {max_attempts})"
            )

            try:
                text = self._attempt(request, cancel_token)
            except (TransientBackendError, MalformedResponseError) as e:
                last_error = e
                attempts.append(
                    CompletionAttempt(
                        model=request.model,
                        attempt_index=index,
                        outcome="failure",
                        error=str(e),
                    )
                )
                logger.warning(f"[Fallback] Model {request.model} failed: {e}")

                if index < max_attempts - 1:
                    delay = self.retry_delay_ms * (RETRY_EXPONENTIAL_BASE**index) / 1000
                    logger.info(f"[Fallback] Waiting {delay}s before trying next model...")
                    self._backoff(delay, cancel_token)
                continue

            attempts.append(
                CompletionAttempt(
                    model=request.model, attempt_index=index, outcome="success"
                )
            )
            logger.info(f"[Fallback] Model {request.model} answered ({len(text)} chars)")
            return CompletionResult(text=text, model=request.model, attempts=attempts)

        tried = [a.model for a in attempts]
        logger.error(f"[Fallback] All {max_attempts} candidate models failed: {tried}")
        raise ExhaustedFallbackError(
            f"All {max_attempts} candidate models failed; last error: {last_error}",
            attempts=attempts,
            last_error=last_error,
        ) from last_error

    def _attempt(
        self, request: CompletionRequest, cancel_token: Optional[CancellationToken]
    ) -> str:
        """
        Issue exactly one completion request

        Raises:
            TransientBackendError: Network failure or non-2xx status
            MalformedResponseError: Body without usable message content
        """
        if self.mock_mode:
            return self._mock_response(request)

        timeout = self.timeout
        if cancel_token is not None and cancel_token.remaining() is not None:
            timeout = min(timeout, cancel_token.remaining())

        try:
            if cancel_token is None:
                response = self._create(request, timeout)
            else:
                response = self._create_cancellable(request, timeout, cancel_token)
        except openai.APIStatusError as e:
            raise TransientBackendError(
                f"Model {request.model} returned HTTP {e.status_code}: {e.message}",
                model=request.model,
                status_code=e.status_code,
            ) from e
        except openai.APIError as e:
            raise TransientBackendError(
                f"Request to model {request.model} failed: {type(e).__name__}: {e}",
                model=request.model,
            ) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                f"Unexpected response format from model {request.model}",
                details={"model": request.model},
            ) from e

        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError(
                f"Empty response content from model {request.model}",
                details={"model": request.model},
            )

        return content

    def _create(self, request: CompletionRequest, timeout: float):
        return self.client.chat.completions.create(**request.to_payload(), timeout=timeout)

    def _create_cancellable(
        self, request: CompletionRequest, timeout: float, cancel_token: CancellationToken
    ):
        """
        Run the request on a worker thread and return as soon as the token fires

        A response arriving after cancellation is discarded.

        Raises:
            OperationCancelledError: The token was cancelled or expired mid-request
        """
        if self._request_pool is None:
            self._request_pool = ThreadPoolExecutor(
                max_workers=REQUEST_WORKERS, thread_name_prefix="llm-request"
            )

        future = self._request_pool.submit(self._create, request, timeout)
        while not future.done():
            if cancel_token.wait(CANCEL_POLL_INTERVAL):
                future.cancel()
                logger.warning(
                    f"[Fallback] Request to {request.model} abandoned after cancellation"
                )
                raise OperationCancelledError(
                    f"Operation cancelled during request to {request.model}"
                )
        return future.result()

    def _backoff(
        self, delay: float, cancel_token: Optional[CancellationToken]
    ) -> None:
        if cancel_token is None:
            self._sleep(delay)
        elif not cancel_token.sleep(delay):
            raise OperationCancelledError("Operation cancelled during backoff")

    def _mock_response(self, request: CompletionRequest) -> str:
        """
        Generate mock response for testing

        Args:
            request: The request that would have been sent

        Returns:
            Canned response text (JSON when JSON was requested)
        """
        logger.debug(f"Generating MOCK response for {request.model}")

        if request.response_format != "json":
            return "Mock response text"

        if "column_mappings" in request.user_prompt:
            return json.dumps({"column_mappings": []})

        return json.dumps(
            {
                "title": "Mock Enhanced Product Title",
                "description": "Mock enhanced description.",
                "bullet_points": ["Mock benefit one", "Mock benefit two"],
                "search_terms": ["mock", "product"],
            }
        )
