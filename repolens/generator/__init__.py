"""Documentation generation through the LLM engine."""

from repolens.generator.engine import (
    FILE_DOCS_FALLBACK,
    README_FALLBACK,
    DocEngine,
    EngineBusyError,
    EngineState,
    InvalidTransitionError,
    clean_output,
)

__all__ = [
    "DocEngine",
    "EngineBusyError",
    "EngineState",
    "FILE_DOCS_FALLBACK",
    "InvalidTransitionError",
    "README_FALLBACK",
    "clean_output",
]
