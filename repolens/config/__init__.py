from .loader import load_config
from .models import (
    MAX_CONTENT_CHARS,
    ContextConfig,
    IngestConfig,
    LayoutConfig,
    LLMSettings,
    OutputConfig,
    RepolensConfig,
)

__all__ = [
    "MAX_CONTENT_CHARS",
    "ContextConfig",
    "IngestConfig",
    "LayoutConfig",
    "LLMSettings",
    "OutputConfig",
    "RepolensConfig",
    "load_config",
]
