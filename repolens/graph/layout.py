"""Deterministic layered (top-to-bottom) layout.

Three phases: rank every node by its depth from a forest root, reorder each
rank with barycenter sweeps to reduce edge crossings, then place nodes on a
fixed grid. Output depends only on the node and edge lists and their order.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Sequence

from repolens.config.models import LayoutConfig
from repolens.graph.models import GraphEdge, GraphNode, Position


def assign_ranks(nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> dict[str, int]:
    """Breadth-first depth from every node without incoming edges.

    Nodes reachable only through a cycle get rank 0.
    """
    ids = [n.id for n in nodes]
    known = set(ids)
    children: dict[str, list[str]] = defaultdict(list)
    indegree = dict.fromkeys(ids, 0)
    for edge in edges:
        if edge.source in known and edge.target in known:
            children[edge.source].append(edge.target)
            indegree[edge.target] += 1

    ranks: dict[str, int] = {}
    queue: deque[str] = deque()
    for node_id in ids:
        if indegree[node_id] == 0 and node_id not in ranks:
            ranks[node_id] = 0
            queue.append(node_id)

    while queue:
        current = queue.popleft()
        for child in children[current]:
            if child not in ranks:
                ranks[child] = ranks[current] + 1
                queue.append(child)

    for node_id in ids:
        ranks.setdefault(node_id, 0)
    return ranks


def count_crossings(
    layers: list[list[str]], lower: dict[str, list[str]]
) -> int:
    """Total edge crossings between each pair of adjacent ranks."""
    total = 0
    for r in range(len(layers) - 1):
        lower_pos = {node_id: i for i, node_id in enumerate(layers[r + 1])}
        pairs = sorted(
            (u, lower_pos[t])
            for u, node_id in enumerate(layers[r])
            for t in lower[node_id]
        )
        total += _inversions([v for _, v in pairs], len(layers[r + 1]))
    return total


def _inversions(values: list[int], size: int) -> int:
    """Pairs i < j with values[i] > values[j], via a Fenwick tree."""
    tree = [0] * (size + 1)
    seen = 0
    count = 0
    for v in values:
        # seen minus number of earlier values <= v
        i = v + 1
        le = 0
        while i > 0:
            le += tree[i]
            i -= i & -i
        count += seen - le
        i = v + 1
        while i <= size:
            tree[i] += 1
            i += i & -i
        seen += 1
    return count


def _reorder(layer: list[str], fixed: list[str], neighbors: dict[str, list[str]]) -> list[str]:
    """Stable barycenter sort of *layer* against the adjacent *fixed* rank."""
    pos = {node_id: i for i, node_id in enumerate(fixed)}

    def key(item: tuple[int, str]) -> tuple[float, int]:
        index, node_id = item
        adjacent = neighbors[node_id]
        if not adjacent:
            return (float(index), index)
        return (sum(pos[n] for n in adjacent) / len(adjacent), index)

    return [node_id for _, node_id in sorted(enumerate(layer), key=key)]


def order_layers(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    ranks: dict[str, int],
    sweeps: int = 8,
) -> list[list[str]]:
    """Group node ids by rank and reduce crossings between adjacent ranks.

    Only edges spanning exactly one rank take part. The best ordering seen
    is kept; on ties the earlier one wins.
    """
    depth = max(ranks.values(), default=-1) + 1
    layers: list[list[str]] = [[] for _ in range(depth)]
    placed: set[str] = set()
    for node in nodes:
        if node.id not in placed:
            placed.add(node.id)
            layers[ranks[node.id]].append(node.id)

    upper: dict[str, list[str]] = defaultdict(list)
    lower: dict[str, list[str]] = defaultdict(list)
    for edge in edges:
        if edge.source in ranks and edge.target in ranks:
            if ranks[edge.target] == ranks[edge.source] + 1:
                upper[edge.target].append(edge.source)
                lower[edge.source].append(edge.target)

    best = [list(layer) for layer in layers]
    best_crossings = count_crossings(best, lower)

    for sweep in range(sweeps):
        if best_crossings == 0:
            break
        if sweep % 2 == 0:
            for r in range(1, depth):
                layers[r] = _reorder(layers[r], layers[r - 1], upper)
        else:
            for r in range(depth - 2, -1, -1):
                layers[r] = _reorder(layers[r], layers[r + 1], lower)
        crossings = count_crossings(layers, lower)
        if crossings < best_crossings:
            best = [list(layer) for layer in layers]
            best_crossings = crossings

    return best


def layout(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    config: LayoutConfig | None = None,
) -> list[GraphNode]:
    """Return copies of *nodes*, in input order, with grid positions set."""
    cfg = config or LayoutConfig()
    if not nodes:
        return []

    ranks = assign_ranks(nodes, edges)
    layers = order_layers(nodes, edges, ranks, cfg.sweeps)

    pitch_x = cfg.node_width + cfg.node_sep
    pitch_y = cfg.node_height + cfg.rank_sep
    widest = max(len(layer) for layer in layers)
    widest_span = widest * cfg.node_width + (widest - 1) * cfg.node_sep

    positions: dict[str, Position] = {}
    for rank, layer in enumerate(layers):
        span = len(layer) * cfg.node_width + (len(layer) - 1) * cfg.node_sep
        offset = (widest_span - span) / 2
        for i, node_id in enumerate(layer):
            positions[node_id] = Position(x=float(offset + i * pitch_x), y=float(rank * pitch_y))

    return [node.model_copy(update={"position": positions[node.id]}) for node in nodes]
