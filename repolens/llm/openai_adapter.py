"""OpenAI adapter."""

from __future__ import annotations

from openai import APIError, AsyncOpenAI, RateLimitError

from repolens.llm.base import LLMProvider
from repolens.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions adapter using the async SDK."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncOpenAI(
            api_key=config.api_key,  # falls back to OPENAI_API_KEY env var
            base_url=config.base_url,
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
            response = await self._client.chat.completions.create(
                model=self.config.model,
                max_tokens=self._max_tokens(max_tokens),
                temperature=self.config.temperature,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
        except APIError as e:
            raise LLMError(
                "openai", "generate", e, retryable=isinstance(e, RateLimitError)
            ) from e

        if not response.choices:
            raise LLMError("openai", "generate", ValueError("No choices in response"))
        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=TokenUsage(
                input_tokens=usage.prompt_tokens if usage else 0,
                output_tokens=usage.completion_tokens if usage else 0,
            ),
            model=response.model,
        )
