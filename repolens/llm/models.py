"""Provider-level config, response, and error types."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

ProviderName = Literal["anthropic", "openai", "google", "ollama"]


class LLMError(Exception):
    """A provider call failed.

    ``retryable`` marks transient failures (rate limits, overload) that the
    DocEngine may try again; everything else is final.
    """

    def __init__(
        self, provider: str, operation: str, cause: Exception, retryable: bool = False
    ) -> None:
        super().__init__(f"{provider}.{operation}: {cause}")
        self.provider = provider
        self.operation = operation
        self.retryable = retryable
        self.__cause__ = cause


class LLMConfig(BaseModel):
    """One provider instance's settings, with the API key already resolved."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderName
    model: str
    max_tokens: int = 4096
    temperature: float = 0.3
    timeout: float = 60.0
    api_key: str | None = None
    base_url: str | None = None


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMResponse(BaseModel):
    """Markdown returned by one generate call."""

    content: str
    model: str
    usage: TokenUsage = TokenUsage()
