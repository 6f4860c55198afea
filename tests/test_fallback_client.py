"""
Unit tests for the LLM Gateway model fallback client
"""

import time
import threading
import pytest
from unittest.mock import MagicMock, patch

from src.services.common.errors import (
    ConfigurationError,
    ExhaustedFallbackError,
    OperationCancelledError,
    TransientBackendError,
)
from src.services.llm_gateway import (
    CancellationToken,
    CompletionOptions,
    ModelFallbackClient,
    resolve_model,
)
from src.services.llm_gateway.response_parser import (
    extract_json_from_response,
    extract_json_object,
)
from src.services.common.errors import MalformedResponseError


def called_models(backend):
    return [c.kwargs["model"] for c in backend.chat.completions.create.call_args_list]


# ============= TEST MODEL RESOLUTION =============


class TestResolveModel:
    """Test alias -> model descriptor resolution"""

    @pytest.mark.parametrize(
        "alias,expected",
        [
            ("gpt4o", "openai/gpt-4o"),
            ("claude", "anthropic/claude-3-5-sonnet"),
            ("gemini", "google/gemini-pro"),
            ("mistral", "mistralai/mistral-large"),
            ("llama", "meta-llama/llama-3-70b-instruct"),
        ],
    )
    def test_known_aliases(self, alias, expected):
        assert resolve_model(alias) == expected

    def test_alias_is_case_insensitive(self):
        assert resolve_model("Claude") == "anthropic/claude-3-5-sonnet"

    def test_unknown_alias_uses_default(self):
        assert resolve_model("not-a-model") == "openai/gpt-4o"
        assert resolve_model(None) == "openai/gpt-4o"


# ============= TEST FALLBACK ORDER AND BACKOFF =============


class TestFallbackOrder:
    """Test candidate ordering, bounded attempts and backoff delays"""

    def test_first_model_succeeds(self, llm_client, backend, sleeps, completion):
        backend.chat.completions.create.return_value = completion("hello")

        result = llm_client.complete_with_details("sys", "user", "model-a")

        assert result.text == "hello"
        assert result.model == "model-a"
        assert called_models(backend) == ["model-a"]
        assert sleeps == []

    def test_falls_back_in_order_with_exponential_delays(
        self, llm_client, backend, sleeps, completion, connection_error, status_error
    ):
        """A fails, B fails, C succeeds: requests go A, B, C with 1s then 2s waits"""
        backend.chat.completions.create.side_effect = [
            connection_error(),
            status_error(503),
            completion('{"ok": true}'),
        ]

        result = llm_client.complete_with_details("sys", "user", "model-a")

        assert called_models(backend) == ["model-a", "model-b", "model-c"]
        assert sleeps == [1.0, 2.0]
        assert result.text == '{"ok": true}'
        assert result.model == "model-c"
        assert [a.outcome for a in result.attempts] == ["failure", "failure", "success"]

    def test_preferred_model_not_repeated(self, backend, sleeps, status_error):
        client = ModelFallbackClient(
            client=backend,
            fallback_models=["model-a", "model-b"],
            sleep=sleeps.append,
        )
        backend.chat.completions.create.side_effect = status_error(500)

        with pytest.raises(ExhaustedFallbackError):
            client.complete("sys", "user", "model-b")

        assert called_models(backend) == ["model-b", "model-a"]

    def test_duplicate_fallbacks_tried_once(self, backend, sleeps, status_error):
        client = ModelFallbackClient(
            client=backend,
            fallback_models=["model-a", "model-a", "model-b", "model-b"],
            max_retries=5,
            sleep=sleeps.append,
        )
        backend.chat.completions.create.side_effect = status_error(500)

        with pytest.raises(ExhaustedFallbackError):
            client.complete("sys", "user", "model-b")

        assert client.build_candidates("model-b") == ["model-b", "model-a"]
        assert called_models(backend) == ["model-b", "model-a"]

    def test_attempts_bounded_by_max_retries(self, backend, sleeps, status_error):
        """Five candidates but max_retries=3 -> exactly three requests"""
        client = ModelFallbackClient(
            client=backend,
            fallback_models=["m2", "m3", "m4", "m5"],
            max_retries=3,
            retry_delay_ms=1000,
            sleep=sleeps.append,
        )
        backend.chat.completions.create.side_effect = status_error(500)

        with pytest.raises(ExhaustedFallbackError):
            client.complete("sys", "user", "m1")

        assert called_models(backend) == ["m1", "m2", "m3"]
        assert sleeps == [1.0, 2.0]

    def test_exhausted_error_references_last_failure(
        self, llm_client, backend, connection_error, status_error
    ):
        backend.chat.completions.create.side_effect = [
            connection_error(),
            status_error(500),
            status_error(429, "rate limited"),
        ]

        with pytest.raises(ExhaustedFallbackError) as exc_info:
            llm_client.complete("sys", "user", "model-a")

        error = exc_info.value
        assert isinstance(error.last_error, TransientBackendError)
        assert error.last_error.status_code == 429
        assert error.last_error.model == "model-c"
        assert error.details["models_tried"] == ["model-a", "model-b", "model-c"]
        assert "rate limited" in error.details["last_error"]
        assert error.__cause__ is error.last_error

    def test_empty_content_triggers_next_candidate(
        self, llm_client, backend, sleeps, completion
    ):
        backend.chat.completions.create.side_effect = [
            completion(""),
            completion("second"),
        ]

        assert llm_client.complete("sys", "user", "model-a") == "second"
        assert called_models(backend) == ["model-a", "model-b"]
        assert sleeps == [1.0]

    def test_missing_choices_is_malformed(self, llm_client, backend):
        bad = MagicMock()
        bad.choices = []
        backend.chat.completions.create.side_effect = [bad, bad, bad]

        with pytest.raises(ExhaustedFallbackError) as exc_info:
            llm_client.complete("sys", "user", "model-a")

        assert isinstance(exc_info.value.last_error, MalformedResponseError)


# ============= TEST REQUEST PAYLOAD =============


class TestRequestPayload:
    """Test what is sent to the backend"""

    def test_json_response_format_and_defaults(self, llm_client, backend, completion):
        backend.chat.completions.create.return_value = completion("{}")

        llm_client.complete(
            "system text", "user text", "model-a", CompletionOptions(response_format="json")
        )

        kwargs = backend.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 2000
        assert "timeout" in kwargs

    def test_text_format_has_no_response_format(self, llm_client, backend, completion):
        backend.chat.completions.create.return_value = completion("plain")

        llm_client.complete("sys", "user", "model-a")

        assert "response_format" not in backend.chat.completions.create.call_args.kwargs


# ============= TEST CONFIGURATION =============


class TestClientConfiguration:
    """Test construction and mock mode"""

    def test_missing_api_key_raises(self):
        with patch("src.services.llm_gateway.api_client.LLM_API_KEY", None):
            with pytest.raises(ConfigurationError):
                ModelFallbackClient(mock_mode=False)

    def test_max_retries_must_be_positive(self, backend):
        with pytest.raises(ConfigurationError):
            ModelFallbackClient(client=backend, max_retries=0)

    @patch("src.services.llm_gateway.api_client.OpenAI")
    def test_sdk_client_built_without_sdk_retries(self, mock_openai_class):
        ModelFallbackClient(api_key="sk-or-test", mock_mode=False)

        kwargs = mock_openai_class.call_args.kwargs
        assert kwargs["api_key"] == "sk-or-test"
        assert kwargs["max_retries"] == 0
        assert "HTTP-Referer" in kwargs["default_headers"]
        assert "X-Title" in kwargs["default_headers"]

    def test_mock_mode_returns_canned_json(self):
        client = ModelFallbackClient(mock_mode=True)

        text = client.complete(
            "sys", "user", options=CompletionOptions(response_format="json")
        )

        assert extract_json_object(text)["title"] == "Mock Enhanced Product Title"

    def test_build_candidates_defaults_to_default_model(self, llm_client):
        assert llm_client.build_candidates() == ["openai/gpt-4o", "model-b", "model-c"]


# ============= TEST CANCELLATION =============


class TestCancellation:
    """Test cancellation token handling inside the fallback loop"""

    def test_cancelled_token_issues_no_request(self, llm_client, backend):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            llm_client.complete("sys", "user", "model-a", cancel_token=token)

        backend.chat.completions.create.assert_not_called()

    def test_cancel_during_backoff_stops_fallback(self, backend, status_error):
        token = CancellationToken()
        client = ModelFallbackClient(
            client=backend, fallback_models=["model-b"], retry_delay_ms=10_000
        )

        def fail_and_cancel(**kwargs):
            token.cancel()
            raise status_error(500)

        backend.chat.completions.create.side_effect = fail_and_cancel

        with pytest.raises(OperationCancelledError):
            client.complete("sys", "user", "model-a", cancel_token=token)

        assert called_models(backend) == ["model-a"]

    def test_cancel_aborts_request_in_flight(self, llm_client, backend, completion):
        """cancel() from another thread returns control before the backend answers"""
        token = CancellationToken()
        release = threading.Event()

        def slow_create(**kwargs):
            release.wait(5)
            return completion('{"late": true}')

        backend.chat.completions.create.side_effect = slow_create
        timer = threading.Timer(0.1, token.cancel)
        timer.start()

        start = time.monotonic()
        try:
            with pytest.raises(OperationCancelledError):
                llm_client.complete("sys", "user", "model-a", cancel_token=token)
            elapsed = time.monotonic() - start
        finally:
            release.set()
            timer.cancel()

        assert elapsed < 2
        assert called_models(backend) == ["model-a"]

    def test_request_completes_normally_with_live_token(
        self, llm_client, backend, completion
    ):
        backend.chat.completions.create.return_value = completion("hello")

        result = llm_client.complete_with_details(
            "sys", "user", "model-a", cancel_token=CancellationToken(timeout=30)
        )

        assert result.text == "hello"
        assert result.model == "model-a"

    def test_expired_deadline(self, llm_client, backend):
        token = CancellationToken(timeout=0)

        assert token.cancelled
        with pytest.raises(OperationCancelledError):
            llm_client.complete("sys", "user", cancel_token=token)
        backend.chat.completions.create.assert_not_called()


# ============= TEST JSON EXTRACTION =============


class TestJsonExtraction:
    """Test JSON extraction from raw model text"""

    def test_direct_json(self):
        assert extract_json_from_response('{"a": 1}') == {"a": 1}

    def test_markdown_wrapped(self):
        text = 'Here you go:\n```json\n{"title": "Chair"}\n```'
        assert extract_json_from_response(text) == {"title": "Chair"}

    def test_text_around_nested_object(self):
        text = 'Result: {"a": {"b": 2}} hope it helps'
        assert extract_json_from_response(text) == {"a": {"b": 2}}

    def test_no_json_raises(self):
        with pytest.raises(MalformedResponseError):
            extract_json_from_response("no json here")

    def test_array_rejected_where_object_required(self):
        with pytest.raises(MalformedResponseError):
            extract_json_object("[1, 2]")
