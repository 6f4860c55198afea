"""
Pydantic models for the LLM Gateway
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

from .config import LLM_TEMPERATURE, LLM_MAX_TOKENS


ResponseFormat = Literal["text", "json"]


class CompletionOptions(BaseModel):
    """Per-call sampling options"""

    temperature: float = Field(default=LLM_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=LLM_MAX_TOKENS, ge=1)
    response_format: ResponseFormat = "text"


class CompletionRequest(BaseModel):
    """One request sent to one model (immutable)"""

    model_config = ConfigDict(frozen=True)

    system_prompt: str
    user_prompt: str
    model: str
    temperature: float
    max_tokens: int
    response_format: ResponseFormat = "text"

    def to_payload(self) -> dict:
        """Keyword arguments for chat.completions.create"""
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": self.user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.response_format == "json":
            payload["response_format"] = {"type": "json_object"}
        return payload


class CompletionAttempt(BaseModel):
    """Bookkeeping for a single attempt against one model"""

    model: str
    attempt_index: int
    outcome: Literal["success", "failure"]
    error: Optional[str] = None


class CompletionResult(BaseModel):
    """Text returned by the first successful model"""

    text: str
    model: str
    attempts: List[CompletionAttempt] = Field(default_factory=list)
