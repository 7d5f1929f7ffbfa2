"""Structure graph: nodes/edges from an Entry forest and a layered layout."""

from repolens.graph.builder import build_graph
from repolens.graph.layout import assign_ranks, count_crossings, layout, order_layers
from repolens.graph.mermaid import to_mermaid
from repolens.graph.models import GraphEdge, GraphNode, Position

__all__ = [
    "GraphEdge",
    "GraphNode",
    "Position",
    "assign_ranks",
    "build_graph",
    "count_crossings",
    "layout",
    "order_layers",
    "to_mermaid",
]
