"""Auto-detect the best available LLM provider."""

from __future__ import annotations

import os

import httpx

from repolens.config.models import LLMSettings
from repolens.llm.base import LLMProvider
from repolens.llm.models import LLMConfig

# (provider, env vars, default model), in priority order
_CLOUD_PROVIDERS: list[tuple[str, tuple[str, ...], str]] = [
    ("anthropic", ("ANTHROPIC_API_KEY",), "claude-haiku-4-5-20251001"),
    ("openai", ("OPENAI_API_KEY",), "gpt-4o"),
    ("google", ("GOOGLE_API_KEY", "GEMINI_API_KEY"), "gemini-2.0-flash"),
]


def auto_detect_provider(settings: LLMSettings | None = None) -> LLMProvider:
    """Return the first available provider.

    Order: Anthropic > OpenAI > Google Gemini > Ollama (local).
    Raises ValueError if nothing is available.
    """
    from repolens.llm import provider_class

    settings = settings or LLMSettings(provider="auto")
    common = {
        "max_tokens": settings.max_tokens,
        "temperature": settings.temperature,
        "timeout": settings.timeout,
    }

    for provider, env_vars, model in _CLOUD_PROVIDERS:
        api_key = next((os.environ[v] for v in env_vars if os.environ.get(v)), None)
        if api_key:
            cls = provider_class(provider)
            return cls(LLMConfig(provider=provider, model=model, api_key=api_key, **common))

    base_url = settings.base_url or "http://localhost:11434"
    try:
        resp = httpx.get(f"{base_url.rstrip('/')}/api/tags", timeout=2.0)
        resp.raise_for_status()
        models = resp.json().get("models", [])
    except (httpx.ConnectError, httpx.TimeoutException, httpx.HTTPStatusError):
        models = []
    if models:
        cls = provider_class("ollama")
        return cls(
            LLMConfig(provider="ollama", model=models[0]["name"], base_url=base_url, **common)
        )

    raise ValueError(
        "No LLM provider found. Set llm.provider in repolens.yaml or export an "
        "API key (ANTHROPIC_API_KEY, OPENAI_API_KEY, GOOGLE_API_KEY) or start Ollama."
    )
