"""Mermaid export of the structure graph.

Produces a ``graph TD`` diagram so the structure can be embedded in
markdown next to a generated README.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from repolens.graph.models import GraphEdge, GraphNode


def _sanitize_node_id(node_id: str) -> str:
    """Convert a path into a valid Mermaid node ID (alphanumeric + underscores)."""
    sanitized = re.sub(r"[^a-zA-Z0-9]", "_", node_id)
    sanitized = re.sub(r"_+", "_", sanitized).strip("_")
    return f"n_{sanitized}" if sanitized else "n_root"


def _escape_label(label: str) -> str:
    return label.replace('"', "#quot;")


def to_mermaid(nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> str:
    """Render nodes and edges as Mermaid ``graph TD`` syntax."""
    ids: dict[str, str] = {}
    used: set[str] = set()
    for node in nodes:
        base = _sanitize_node_id(node.id)
        candidate = base
        suffix = 2
        while candidate in used:
            candidate = f"{base}_{suffix}"
            suffix += 1
        used.add(candidate)
        ids[node.id] = candidate

    lines = ["graph TD"]
    for node in nodes:
        label = _escape_label(node.label)
        if node.kind == "directory":
            lines.append(f'    {ids[node.id]}["{label}/"]')
        else:
            lines.append(f'    {ids[node.id]}("{label}")')
    for edge in edges:
        if edge.source in ids and edge.target in ids:
            lines.append(f"    {ids[edge.source]} --> {ids[edge.target]}")
    return "\n".join(lines) + "\n"
