"""Flatten an Entry forest into graph nodes and edges."""

from __future__ import annotations

from collections.abc import Sequence

from repolens.graph.models import GraphEdge, GraphNode
from repolens.ingest.models import Entry


def build_graph(entries: Sequence[Entry]) -> tuple[list[GraphNode], list[GraphEdge]]:
    """Pre-order traversal: one node per entry, one edge per parent/child pair."""
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []

    def traverse(items: Sequence[Entry], parent_id: str | None) -> None:
        for entry in items:
            nodes.append(GraphNode(id=entry.path, label=entry.name, kind=entry.kind))
            if parent_id is not None:
                edges.append(
                    GraphEdge(id=f"{parent_id}->{entry.path}", source=parent_id, target=entry.path)
                )
            if entry.children:
                traverse(entry.children, entry.path)

    traverse(entries, None)
    return nodes, edges
