"""Tests for DocEngine: state machine, fallbacks, output cleanup."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from repolens.config.models import RepolensConfig
from repolens.context.models import ProjectContext
from repolens.generator import (
    FILE_DOCS_FALLBACK,
    README_FALLBACK,
    DocEngine,
    EngineBusyError,
    EngineState,
    InvalidTransitionError,
    clean_output,
)
from repolens.llm.models import LLMError, LLMResponse, TokenUsage


def _response(content: str) -> LLMResponse:
    return LLMResponse(content=content, usage=TokenUsage(input_tokens=1, output_tokens=1), model="m")


@pytest.fixture
def project_context():
    return ProjectContext(
        title="Demo",
        file_tree="- src (directory)\n",
        manifest="Filename: package.json\nContent:\n{}",
        snippets="\n--- File: App.tsx ---\nx\n...\n",
    )


class TestCleanOutput:
    def test_strips_preamble(self):
        assert clean_output("Here is the README:\n# Demo\n") == "# Demo"

    def test_preamble_case_insensitive(self):
        assert clean_output("here is your file:\n## Hi") == "## Hi"

    def test_only_leading_preamble(self):
        text = "# Demo\nHere is a list:\n- a"
        assert clean_output(text) == text

    def test_trims_whitespace(self):
        assert clean_output("\n\n# Demo\n\n") == "# Demo"


class TestDocEngineLifecycle:
    def test_starts_idle(self, mock_llm_provider):
        engine = DocEngine(lambda: mock_llm_provider)
        assert engine.state is EngineState.IDLE
        assert not engine.busy

    async def test_first_use_loads_then_ready(self, mock_llm_provider, project_context):
        seen: list[EngineState] = []
        engine = DocEngine(lambda: mock_llm_provider, on_state_change=seen.append)

        await engine.generate_project_readme(project_context)

        assert seen == [
            EngineState.LOADING,
            EngineState.READY,
            EngineState.GENERATING,
            EngineState.READY,
        ]
        assert engine.state is EngineState.READY

    async def test_factory_called_once(self, mock_llm_provider, project_context):
        factory = MagicMock(return_value=mock_llm_provider)
        engine = DocEngine(factory)

        await engine.generate_project_readme(project_context)
        await engine.generate_file_docs("x = 1", "a.py")

        factory.assert_called_once()
        assert mock_llm_provider.generate.await_count == 2

    async def test_failed_load_returns_to_idle(self, project_context, caplog):
        def factory():
            raise ValueError("Missing API key")

        seen: list[EngineState] = []
        engine = DocEngine(factory, on_state_change=seen.append)

        with caplog.at_level(logging.ERROR, logger="repolens.generator.engine"):
            result = await engine.generate_project_readme(project_context)

        assert result == README_FALLBACK
        assert engine.state is EngineState.IDLE
        assert seen == [EngineState.LOADING, EngineState.IDLE]
        assert "Could not initialise LLM provider" in caplog.text

    async def test_load_retried_after_failure(self, mock_llm_provider, project_context):
        factory = MagicMock(side_effect=[ValueError("offline"), mock_llm_provider])
        engine = DocEngine(factory)

        assert await engine.generate_project_readme(project_context) == README_FALLBACK
        assert await engine.generate_project_readme(project_context) != README_FALLBACK
        assert engine.state is EngineState.READY

    async def test_ensure_ready(self, mock_llm_provider):
        engine = DocEngine(lambda: mock_llm_provider)
        assert await engine.ensure_ready() is True
        assert await engine.ensure_ready() is True
        assert engine.state is EngineState.READY

    def test_invalid_transition(self, mock_llm_provider):
        engine = DocEngine(lambda: mock_llm_provider)
        with pytest.raises(InvalidTransitionError) as exc_info:
            engine._transition(EngineState.GENERATING)
        assert exc_info.value.current is EngineState.IDLE
        assert exc_info.value.target is EngineState.GENERATING

    async def test_concurrent_request_rejected(self, mock_llm_provider, project_context):
        release = asyncio.Event()

        async def slow_generate(**kwargs):
            await release.wait()
            return _response("# Demo")

        mock_llm_provider.generate = AsyncMock(side_effect=slow_generate)
        engine = DocEngine(lambda: mock_llm_provider)

        first = asyncio.create_task(engine.generate_project_readme(project_context))
        while engine.state is not EngineState.GENERATING:
            await asyncio.sleep(0.01)
        assert engine.busy

        assert await engine.generate_file_docs("x", "a.py") == FILE_DOCS_FALLBACK
        with pytest.raises(EngineBusyError):
            await engine._generate("system", "user")

        release.set()
        assert await first == "# Demo"
        assert engine.state is EngineState.READY


class TestDocEngineGeneration:
    async def test_readme_uses_rendered_prompts(self, mock_llm_provider, project_context):
        engine = DocEngine(lambda: mock_llm_provider)

        result = await engine.generate_project_readme(project_context)

        assert result.startswith("# Demo")
        kwargs = mock_llm_provider.generate.call_args.kwargs
        assert 'project titled "Demo"' in kwargs["system"]
        assert "--- FILE STRUCTURE ---" in kwargs["user"]

    async def test_readme_preamble_removed(self, mock_llm_provider, project_context):
        mock_llm_provider.generate = AsyncMock(
            return_value=_response("Here is the README for Demo:\n# Demo\nBody")
        )
        engine = DocEngine(lambda: mock_llm_provider)
        assert await engine.generate_project_readme(project_context) == "# Demo\nBody"

    async def test_readme_fallback_on_provider_error(self, mock_llm_provider, project_context):
        mock_llm_provider.generate = AsyncMock(
            side_effect=LLMError("claude", "generate", RuntimeError("boom"))
        )
        engine = DocEngine(lambda: mock_llm_provider)

        assert await engine.generate_project_readme(project_context) == README_FALLBACK
        assert engine.state is EngineState.READY

    async def test_file_docs(self, mock_llm_provider):
        mock_llm_provider.generate = AsyncMock(return_value=_response("## a.py\nDoes things."))
        engine = DocEngine(lambda: mock_llm_provider)

        result = await engine.generate_file_docs("x = 1", "a.py")

        assert result == "## a.py\nDoes things."
        kwargs = mock_llm_provider.generate.call_args.kwargs
        assert kwargs["user"] == "Filename: a.py\nCode:\nx = 1"

    async def test_file_docs_fallback(self, mock_llm_provider):
        mock_llm_provider.generate = AsyncMock(side_effect=RuntimeError("network down"))
        engine = DocEngine(lambda: mock_llm_provider)
        assert await engine.generate_file_docs("x", "a.py") == FILE_DOCS_FALLBACK

    async def test_from_config_builds_provider_from_settings(self, mock_llm_provider):
        cfg = RepolensConfig()
        cfg.context.max_file_code_chars = 3
        with patch(
            "repolens.generator.engine.create_llm_provider", return_value=mock_llm_provider
        ) as create:
            engine = DocEngine.from_config(cfg)
            await engine.generate_file_docs("abcdef", "a.py")

        create.assert_called_once_with(cfg.llm)
        assert mock_llm_provider.generate.call_args.kwargs["user"].endswith("Code:\nabc")


class TestDocEngineRetry:
    async def test_retryable_error_tried_again(self, mock_llm_provider):
        mock_llm_provider.generate = AsyncMock(side_effect=[
            LLMError("claude", "generate", RuntimeError("429"), retryable=True),
            _response("## a.py"),
        ])
        engine = DocEngine(lambda: mock_llm_provider, max_retries=2, retry_delay=0)

        assert await engine.generate_file_docs("x", "a.py") == "## a.py"
        assert mock_llm_provider.generate.await_count == 2

    async def test_gives_up_after_max_retries(self, mock_llm_provider, project_context, caplog):
        mock_llm_provider.generate = AsyncMock(
            side_effect=LLMError("claude", "generate", RuntimeError("overloaded"), retryable=True)
        )
        engine = DocEngine(lambda: mock_llm_provider, max_retries=2, retry_delay=0)

        with caplog.at_level(logging.WARNING, logger="repolens.generator.engine"):
            result = await engine.generate_project_readme(project_context)

        assert result == README_FALLBACK
        assert mock_llm_provider.generate.await_count == 3
        assert "retry 2/2" in caplog.text
        assert engine.state is EngineState.READY

    async def test_non_retryable_error_not_repeated(self, mock_llm_provider):
        mock_llm_provider.generate = AsyncMock(
            side_effect=LLMError("openai", "generate", RuntimeError("bad key"))
        )
        engine = DocEngine(lambda: mock_llm_provider, max_retries=5, retry_delay=0)

        assert await engine.generate_file_docs("x", "a.py") == FILE_DOCS_FALLBACK
        mock_llm_provider.generate.assert_awaited_once()

    async def test_retry_settings_come_from_config(self, mock_llm_provider):
        cfg = RepolensConfig()
        cfg.llm.max_retries = 1
        cfg.llm.retry_delay = 0
        mock_llm_provider.generate = AsyncMock(
            side_effect=LLMError("ollama", "generate", RuntimeError("429"), retryable=True)
        )
        with patch("repolens.generator.engine.create_llm_provider", return_value=mock_llm_provider):
            engine = DocEngine.from_config(cfg)
            assert await engine.generate_file_docs("x", "a.py") == FILE_DOCS_FALLBACK

        assert mock_llm_provider.generate.await_count == 2
