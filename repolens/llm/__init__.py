"""LLM provider abstraction layer."""

import importlib
import os

from repolens.config.models import LLMSettings
from repolens.llm.base import LLMProvider
from repolens.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage

# Adapters are imported on demand so one vendor SDK never gates the others.
_PROVIDER_MAP: dict[str, tuple[str, str]] = {
    "anthropic": ("repolens.llm.claude", "ClaudeProvider"),
    "openai": ("repolens.llm.openai_adapter", "OpenAIProvider"),
    "google": ("repolens.llm.gemini", "GeminiProvider"),
    "ollama": ("repolens.llm.ollama", "OllamaProvider"),
}


def provider_class(name: str) -> type[LLMProvider]:
    """Resolve a provider name to its adapter class."""
    target = _PROVIDER_MAP.get(name)
    if target is None:
        raise ValueError(
            f"Unsupported LLM provider: {name!r}. "
            f"Supported: {', '.join(_PROVIDER_MAP)}"
        )
    module_name, class_name = target
    return getattr(importlib.import_module(module_name), class_name)


def create_llm_provider(settings: LLMSettings) -> LLMProvider:
    """Create an LLM provider from app-level settings.

    Resolves the API key from the env var named in settings.api_key_env and
    bridges LLMSettings to the provider-level LLMConfig. The "auto" provider
    delegates to auto_detect_provider().
    """
    if settings.provider == "auto":
        from repolens.llm.auto_detect import auto_detect_provider

        return auto_detect_provider(settings)

    cls = provider_class(settings.provider)

    api_key: str | None = None
    # Ollama doesn't require an API key
    if settings.provider != "ollama":
        api_key = os.environ.get(settings.api_key_env)
        if not api_key:
            raise ValueError(
                f"Missing API key: set environment variable {settings.api_key_env!r}"
            )

    return cls(
        LLMConfig(
            provider=settings.provider,
            model=settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.timeout,
            api_key=api_key,
            base_url=settings.base_url,
        )
    )


__all__ = [
    "LLMConfig",
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "TokenUsage",
    "create_llm_provider",
    "provider_class",
]
