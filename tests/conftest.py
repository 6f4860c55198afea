import pytest
import sys
import httpx
import openai
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add src to Path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

CHAT_URL = "https://openrouter.ai/api/v1/chat/completions"


@pytest.fixture(autouse=True)
def clear_service_factory_cache():
    """
    Auto Clear ServiceFactory cache before and after each test

    Ensures test isolation by preventing cached instances from one test affecting another test.

    This fixture runs automatically for ALL tests (autouse=True)
    """

    from src.services.common.service_factory import ServiceFactory

    # Clear ServiceFactory cache before test
    ServiceFactory.clear_cache()

    # Yield control back to test
    yield

    # Clear ServiceFactory cache after test
    ServiceFactory.clear_cache()


def make_completion(content):
    """Object shaped like an openai ChatCompletion with one choice"""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def make_connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", CHAT_URL))


def make_status_error(status_code=500, message="upstream failure"):
    response = httpx.Response(status_code, request=httpx.Request("POST", CHAT_URL))
    return openai.APIStatusError(message, response=response, body=None)


@pytest.fixture
def completion():
    return make_completion


@pytest.fixture
def connection_error():
    return make_connection_error


@pytest.fixture
def status_error():
    return make_status_error


@pytest.fixture
def backend():
    """Stand-in for the OpenAI SDK client (chat.completions.create is a MagicMock)"""
    return MagicMock()


@pytest.fixture
def sleeps():
    """Records backoff delays instead of sleeping"""
    return []


@pytest.fixture
def llm_client(backend, sleeps):
    """Fallback client over the fake backend with candidates A, B, C"""
    from src.services.llm_gateway import ModelFallbackClient

    return ModelFallbackClient(
        client=backend,
        fallback_models=["model-b", "model-c"],
        max_retries=3,
        retry_delay_ms=1000,
        sleep=sleeps.append,
    )


@pytest.fixture
def mock_llm_mode():
    """Default-constructed clients use canned responses instead of the network"""
    with patch("src.services.llm_gateway.api_client.MOCK_LLM", True):
        yield
