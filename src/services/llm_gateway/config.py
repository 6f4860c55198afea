"""
Configuration constants for the LLM Gateway
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API credentials (OpenRouter-compatible backend)
LLM_API_KEY = os.getenv("OPENROUTER_API_KEY") or os.getenv("LLM_API_KEY")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1")

# Client-identifying headers sent with every request
LLM_APP_URL = os.getenv("LLM_APP_URL", "https://marketplace-enhancer.app")
LLM_APP_TITLE = os.getenv("LLM_APP_TITLE", "Marketplace Product Enhancer")

# Models
DEFAULT_MODEL = os.getenv("LLM_DEFAULT_MODEL", "openai/gpt-4o")
FALLBACK_MODELS = [
    m.strip()
    for m in os.getenv(
        "LLM_FALLBACK_MODELS",
        "anthropic/claude-3-haiku,"
        "anthropic/claude-3-5-sonnet,"
        "google/gemini-pro,"
        "meta-llama/llama-3-70b-instruct",
    ).split(",")
    if m.strip()
]

# Short aliases accepted as a model preference
MODEL_ALIASES = {
    "gpt4o": "openai/gpt-4o",
    "claude": "anthropic/claude-3-5-sonnet",
    "gemini": "google/gemini-pro",
    "mistral": "mistralai/mistral-large",
    "llama": "meta-llama/llama-3-70b-instruct",
}

# Request defaults
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.2"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2000"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))

# Retry Configuration
MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "3"))
RETRY_DELAY_MS = int(os.getenv("LLM_RETRY_DELAY_MS", "1000"))
RETRY_EXPONENTIAL_BASE = 2

# Development mode
MOCK_LLM = os.getenv("MOCK_LLM", "false").lower() == "true"

# Cancellable requests run on worker threads; the caller checks the token this often
REQUEST_WORKERS = int(os.getenv("LLM_REQUEST_WORKERS", "4"))
CANCEL_POLL_INTERVAL = 0.05
