"""Google Gemini adapter."""

from __future__ import annotations

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from repolens.llm.base import LLMProvider
from repolens.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage


class GeminiProvider(LLMProvider):
    """Gemini adapter using the google-generativeai async API."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        genai.configure(api_key=config.api_key)
        self._model = genai.GenerativeModel(config.model)

    async def generate(
        self,
        system: str,
        user: str,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        try:
            response = await self._model.generate_content_async(
                f"{system}\n\n{user}",
                generation_config=genai.types.GenerationConfig(
                    max_output_tokens=self._max_tokens(max_tokens),
                    temperature=self.config.temperature,
                ),
                request_options={"timeout": self.config.timeout},
            )
        except google_exceptions.GoogleAPIError as e:
            raise LLMError(
                "gemini",
                "generate",
                e,
                retryable=isinstance(e, google_exceptions.ResourceExhausted),
            ) from e

        if not response.text:
            raise LLMError("gemini", "generate", ValueError("No text content in response"))
        usage = response.usage_metadata
        return LLMResponse(
            content=response.text,
            usage=TokenUsage(
                input_tokens=usage.prompt_token_count,
                output_tokens=usage.candidates_token_count,
            ),
            model=self.config.model,
        )
