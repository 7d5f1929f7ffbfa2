"""Context extraction: bounded text artifacts for README generation."""

from repolens.context.builder import ContextBuilder
from repolens.context.dependency_parser import PARSERS, DependencyParser, collect_dependencies
from repolens.context.file_tree import flatten_tree
from repolens.context.manifest import MANIFEST_NAMES, NO_MANIFEST, locate_manifest
from repolens.context.models import ProjectContext, TruncationConfig
from repolens.context.prompts import PromptTemplate
from repolens.context.snippets import (
    HeuristicClassifier,
    RelevanceClassifier,
    collect_key_snippets,
)

__all__ = [
    "ContextBuilder",
    "DependencyParser",
    "HeuristicClassifier",
    "MANIFEST_NAMES",
    "NO_MANIFEST",
    "PARSERS",
    "ProjectContext",
    "PromptTemplate",
    "RelevanceClassifier",
    "TruncationConfig",
    "collect_dependencies",
    "collect_key_snippets",
    "flatten_tree",
    "locate_manifest",
]
