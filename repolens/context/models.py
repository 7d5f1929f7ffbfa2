"""Pydantic models for the context subsystem."""

from __future__ import annotations

from pydantic import BaseModel


class TruncationConfig(BaseModel):
    """Prompt-level limits, applied on top of the extractor caps."""

    max_manifest_chars: int = 4000
    max_file_code_chars: int = 10_000


class ProjectContext(BaseModel):
    """Extracted project context for LLM prompt injection."""

    title: str
    file_tree: str = ""
    manifest: str = ""
    snippets: str = ""
    dependencies_list: str = ""
