"""Documentation engine: single owner of the LLM provider and its lifecycle.

State machine::

    idle --first use--> loading --ok--> ready --request--> generating
      ^                    |              ^                    |
      +------failed--------+              +--done or failed----+
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable
from enum import Enum
from functools import partial

from repolens.config.models import RepolensConfig
from repolens.context.models import ProjectContext, TruncationConfig
from repolens.context.prompts import PromptTemplate
from repolens.llm import create_llm_provider
from repolens.llm.base import LLMProvider
from repolens.llm.models import LLMError

logger = logging.getLogger(__name__)

README_FALLBACK = "# Error\nFailed to generate project docs."
FILE_DOCS_FALLBACK = "# Error\nFailed."

_PREAMBLE_RE = re.compile(r"^Here is.*?:\n", re.IGNORECASE)


class EngineState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    GENERATING = "generating"


_TRANSITIONS: dict[EngineState, frozenset[EngineState]] = {
    EngineState.IDLE: frozenset({EngineState.LOADING}),
    EngineState.LOADING: frozenset({EngineState.READY, EngineState.IDLE}),
    EngineState.READY: frozenset({EngineState.GENERATING}),
    EngineState.GENERATING: frozenset({EngineState.READY}),
}


class InvalidTransitionError(RuntimeError):
    """An engine state change not allowed by the state machine."""

    def __init__(self, current: EngineState, target: EngineState) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move engine from {current.value} to {target.value}")


class EngineBusyError(RuntimeError):
    """A generation request arrived while another one is running."""


def clean_output(markdown: str) -> str:
    """Drop a leading "Here is ...:" line and surrounding whitespace."""
    return _PREAMBLE_RE.sub("", markdown, count=1).strip()


class DocEngine:
    """Generates README and per-file markdown through a lazily created provider.

    Engine failures never escape: they are logged and mapped to the fixed
    fallback markdown strings. Provider errors marked retryable are tried
    again up to *max_retries* times with a linearly growing delay.
    """

    def __init__(
        self,
        provider_factory: Callable[[], LLMProvider],
        prompts: PromptTemplate | None = None,
        on_state_change: Callable[[EngineState], None] | None = None,
        max_retries: int = 0,
        retry_delay: float = 1.0,
    ) -> None:
        self._factory = provider_factory
        self._prompts = prompts or PromptTemplate()
        self._on_state_change = on_state_change
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._provider: LLMProvider | None = None
        self._state = EngineState.IDLE
        self._load_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: RepolensConfig, **kwargs) -> DocEngine:
        truncation = TruncationConfig(
            max_manifest_chars=config.context.max_manifest_chars,
            max_file_code_chars=config.context.max_file_code_chars,
        )
        return cls(
            partial(create_llm_provider, config.llm),
            prompts=PromptTemplate(truncation),
            max_retries=config.llm.max_retries,
            retry_delay=config.llm.retry_delay,
            **kwargs,
        )

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state in (EngineState.LOADING, EngineState.GENERATING)

    def _transition(self, target: EngineState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvalidTransitionError(self._state, target)
        logger.debug("Engine %s -> %s", self._state.value, target.value)
        self._state = target
        if self._on_state_change is not None:
            self._on_state_change(target)

    async def _load(self) -> LLMProvider | None:
        async with self._load_lock:
            if self._provider is None:
                self._transition(EngineState.LOADING)
                try:
                    self._provider = await asyncio.to_thread(self._factory)
                except Exception:
                    logger.exception("Could not initialise LLM provider")
                    self._transition(EngineState.IDLE)
                    return None
                self._transition(EngineState.READY)
            return self._provider

    async def ensure_ready(self) -> bool:
        """Create the provider on first use. Returns False if that failed."""
        return await self._load() is not None

    async def generate_project_readme(self, context: ProjectContext) -> str:
        """Project README markdown, or README_FALLBACK if the engine failed or was busy."""
        system, user = self._prompts.render_readme(context)
        try:
            result = await self._generate(system, user)
        except EngineBusyError as e:
            logger.warning("%s; README request dropped", e)
            return README_FALLBACK
        if result is None:
            return README_FALLBACK
        return clean_output(result)

    async def generate_file_docs(self, code: str, filename: str) -> str:
        """Documentation for one file, or FILE_DOCS_FALLBACK if the engine failed or was busy."""
        system, user = self._prompts.render_file_docs(code, filename)
        try:
            result = await self._generate(system, user)
        except EngineBusyError as e:
            logger.warning("%s; docs request for %s dropped", e, filename)
            return FILE_DOCS_FALLBACK
        return FILE_DOCS_FALLBACK if result is None else result

    async def _generate(self, system: str, user: str) -> str | None:
        """Run one request. Raises EngineBusyError if another is in flight."""
        if self._state is EngineState.GENERATING:
            raise EngineBusyError("A generation request is already running")
        provider = await self._load()
        if provider is None:
            return None
        if self._state is EngineState.GENERATING:
            raise EngineBusyError("A generation request is already running")

        self._transition(EngineState.GENERATING)
        try:
            return await self._call_with_retry(provider, system, user)
        finally:
            self._transition(EngineState.READY)

    async def _call_with_retry(self, provider: LLMProvider, system: str, user: str) -> str | None:
        attempt = 0
        while True:
            try:
                response = await provider.generate(system=system, user=user)
            except LLMError as e:
                if not e.retryable or attempt >= self._max_retries:
                    logger.error("Documentation generation failed: %s", e)
                    return None
                attempt += 1
                logger.warning("%s; retry %d/%d", e, attempt, self._max_retries)
                await asyncio.sleep(self._retry_delay * attempt)
            except Exception:
                logger.exception("Documentation generation failed")
                return None
            else:
                return response.content
