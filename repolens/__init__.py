"""repolens - directory ingestion, layered structure graphs, and README context for LLMs."""

from repolens.config import RepolensConfig, load_config
from repolens.context import (
    ContextBuilder,
    collect_key_snippets,
    flatten_tree,
    locate_manifest,
)
from repolens.generator import DocEngine, EngineState
from repolens.graph import build_graph, layout
from repolens.ingest import (
    DirectoryIngester,
    Entry,
    IngestionSession,
    LocalDirectoryHandle,
    Snapshot,
)
from repolens.output import MarkdownWriter

__version__ = "0.1.0"

__all__ = [
    "ContextBuilder",
    "DirectoryIngester",
    "DocEngine",
    "EngineState",
    "Entry",
    "IngestionSession",
    "LocalDirectoryHandle",
    "MarkdownWriter",
    "RepolensConfig",
    "Snapshot",
    "build_graph",
    "collect_key_snippets",
    "flatten_tree",
    "layout",
    "load_config",
    "locate_manifest",
]
