"""Anthropic Claude adapter."""

from __future__ import annotations

from anthropic import APIError, AsyncAnthropic, RateLimitError

from repolens.llm.base import LLMProvider
from repolens.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage


class ClaudeProvider(LLMProvider):
    """Claude adapter using the Anthropic async SDK."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncAnthropic(
            api_key=config.api_key,  # falls back to ANTHROPIC_API_KEY env var
            timeout=config.timeout,
            max_retries=0,  # DocEngine retries retryable LLMErrors
        )

    async def generate(
        self,
        system: str,
        user: str,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        try:
            message = await self._client.messages.create(
                model=self.config.model,
                max_tokens=self._max_tokens(max_tokens),
                temperature=self.config.temperature,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except APIError as e:
            raise LLMError(
                "claude", "generate", e, retryable=isinstance(e, RateLimitError)
            ) from e

        texts = [block.text for block in message.content if hasattr(block, "text")]
        if not texts:
            raise LLMError("claude", "generate", ValueError("No text content in response"))
        return LLMResponse(
            content="".join(texts),
            usage=TokenUsage(
                input_tokens=message.usage.input_tokens,
                output_tokens=message.usage.output_tokens,
            ),
            model=message.model,
        )
