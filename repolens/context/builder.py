"""Context builder: turns an ingested forest into a ProjectContext.

Thin orchestrator over flatten_tree, locate_manifest, collect_key_snippets
and the DependencyParser registry. Pure: it never touches the filesystem.
"""

from __future__ import annotations

from collections.abc import Sequence

from repolens.config.models import ContextConfig
from repolens.context.dependency_parser import PARSERS, DependencyParser, collect_dependencies
from repolens.context.file_tree import flatten_tree
from repolens.context.manifest import locate_manifest
from repolens.context.models import ProjectContext
from repolens.context.snippets import HeuristicClassifier, RelevanceClassifier, collect_key_snippets
from repolens.ingest.models import Entry
from repolens.ingest.session import Snapshot


class ContextBuilder:
    """Builds structured LLM prompt context from an ingested snapshot."""

    def __init__(
        self,
        config: ContextConfig | None = None,
        classifier: RelevanceClassifier | None = None,
        parsers: list[DependencyParser] | None = None,
    ) -> None:
        self.config = config or ContextConfig()
        self._classifier = classifier or HeuristicClassifier()
        self._parsers = parsers if parsers is not None else PARSERS

    @staticmethod
    def from_snapshot(snapshot: Snapshot, title: str | None = None) -> ProjectContext:
        """Build a ProjectContext with default settings (static convenience method)."""
        return ContextBuilder().build(snapshot.entries, title or snapshot.title)

    def build(self, entries: Sequence[Entry], title: str) -> ProjectContext:
        cfg = self.config
        deps = collect_dependencies(entries, self._parsers)
        return ProjectContext(
            title=title,
            file_tree=flatten_tree(entries, cfg.tree_max_depth),
            manifest=locate_manifest(entries, cfg.manifest_names),
            snippets=collect_key_snippets(
                entries,
                cfg.snippet_total_cap,
                self._classifier,
                cfg.snippet_chars,
            ),
            dependencies_list="\n".join(f"- {d}" for d in deps),
        )
