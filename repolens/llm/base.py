"""Abstract LLM interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from repolens.llm.models import LLMConfig, LLMResponse


class LLMProvider(ABC):
    """Provider-agnostic interface for markdown generation.

    Adapters raise ``LLMError`` for provider failures; callers decide how to
    degrade.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abstractmethod
    async def generate(
        self,
        system: str,
        user: str,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a complete response (one-shot)."""
        ...

    def _max_tokens(self, max_tokens: int | None) -> int:
        return max_tokens if max_tokens is not None else self.config.max_tokens
