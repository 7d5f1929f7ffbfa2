"""Tests for graph building, layered layout, and Mermaid export."""

from __future__ import annotations

from conftest import dir_entry, file_entry
from repolens.config.models import LayoutConfig
from repolens.graph import (
    GraphEdge,
    GraphNode,
    assign_ranks,
    build_graph,
    count_crossings,
    layout,
    order_layers,
    to_mermaid,
)


def _node(node_id: str, kind: str = "file") -> GraphNode:
    return GraphNode(id=node_id, label=node_id.rsplit("/", 1)[-1], kind=kind)


def _edge(source: str, target: str) -> GraphEdge:
    return GraphEdge(id=f"{source}->{target}", source=source, target=target)


class TestBuildGraph:
    def test_one_node_per_entry_one_edge_per_child(self, sample_forest):
        nodes, edges = build_graph(sample_forest)
        assert len(nodes) == 9
        assert len(edges) == 6
        assert [n.id for n in nodes[:3]] == ["/src", "/src/models", "/src/models/UserModel.ts"]

    def test_edge_ids_and_endpoints(self):
        forest = (dir_entry("/src", file_entry("/src/a.py")),)
        nodes, edges = build_graph(forest)
        assert nodes[0].kind == "directory"
        assert nodes[1].label == "a.py"
        assert edges == [GraphEdge(id="/src->/src/a.py", source="/src", target="/src/a.py")]

    def test_roots_have_no_incoming_edges(self, sample_forest):
        _, edges = build_graph(sample_forest)
        targets = {e.target for e in edges}
        for root in sample_forest:
            assert root.path not in targets

    def test_empty(self):
        assert build_graph(()) == ([], [])


class TestAssignRanks:
    def test_depth_from_root(self, sample_forest):
        nodes, edges = build_graph(sample_forest)
        ranks = assign_ranks(nodes, edges)
        assert ranks["/src"] == 0
        assert ranks["/package.json"] == 0
        assert ranks["/src/models"] == 1
        assert ranks["/src/models/UserModel.ts"] == 2

    def test_cycle_only_nodes_get_rank_zero(self):
        nodes = [_node("R"), _node("X"), _node("Y")]
        edges = [_edge("X", "Y"), _edge("Y", "X")]
        assert assign_ranks(nodes, edges) == {"R": 0, "X": 0, "Y": 0}

    def test_edges_to_unknown_nodes_ignored(self):
        ranks = assign_ranks([_node("A")], [_edge("A", "ghost")])
        assert ranks == {"A": 0}


class TestCrossings:
    def test_count(self):
        layers = [["a", "b"], ["c", "d"]]
        assert count_crossings(layers, {"a": ["d"], "b": ["c"], "c": [], "d": []}) == 1
        assert count_crossings(layers, {"a": ["c"], "b": ["d"], "c": [], "d": []}) == 0

    def test_sweeps_remove_avoidable_crossing(self):
        nodes = [_node("A", "directory"), _node("B", "directory"), _node("b1"), _node("a1")]
        edges = [_edge("A", "a1"), _edge("B", "b1")]
        ranks = assign_ranks(nodes, edges)

        layers = order_layers(nodes, edges, ranks)

        assert layers == [["A", "B"], ["a1", "b1"]]

    def test_zero_sweeps_keeps_input_order(self):
        nodes = [_node("A", "directory"), _node("B", "directory"), _node("b1"), _node("a1")]
        edges = [_edge("A", "a1"), _edge("B", "b1")]
        layers = order_layers(nodes, edges, assign_ranks(nodes, edges), sweeps=0)
        assert layers == [["A", "B"], ["b1", "a1"]]


class TestLayout:
    def test_root_centered_over_two_children(self):
        forest = (dir_entry("/r", file_entry("/r/a"), file_entry("/r/b")),)
        nodes, edges = build_graph(forest)

        placed = {n.id: n.position for n in layout(nodes, edges)}

        assert (placed["/r"].x, placed["/r"].y) == (140.0, 0.0)
        assert (placed["/r/a"].x, placed["/r/a"].y) == (0.0, 200.0)
        assert (placed["/r/b"].x, placed["/r/b"].y) == (280.0, 200.0)

    def test_every_node_positioned_in_input_order(self, sample_forest):
        nodes, edges = build_graph(sample_forest)
        placed = layout(nodes, edges)
        assert [n.id for n in placed] == [n.id for n in nodes]
        assert all(n.position is not None for n in placed)
        # inputs are not mutated
        assert all(n.position is None for n in nodes)

    def test_deterministic(self, sample_forest):
        nodes, edges = build_graph(sample_forest)
        assert layout(nodes, edges) == layout(nodes, edges)

    def test_rank_drives_y(self, sample_forest):
        nodes, edges = build_graph(sample_forest)
        placed = {n.id: n.position for n in layout(nodes, edges)}
        assert placed["/src"].y == 0
        assert placed["/src/models"].y == 200
        assert placed["/src/models/UserModel.ts"].y == 400

    def test_no_overlap_within_rank(self, sample_forest):
        nodes, edges = build_graph(sample_forest)
        cfg = LayoutConfig()
        by_row: dict[float, list[float]] = {}
        for n in layout(nodes, edges, cfg):
            by_row.setdefault(n.position.y, []).append(n.position.x)
        for xs in by_row.values():
            xs.sort()
            for left, right in zip(xs, xs[1:]):
                assert right - left >= cfg.node_width + cfg.node_sep

    def test_custom_spacing(self):
        cfg = LayoutConfig(node_width=100, node_height=50, rank_sep=10, node_sep=20)
        nodes = [_node("A", "directory"), _node("A/x")]
        placed = layout(nodes, [_edge("A", "A/x")], cfg)
        assert placed[1].position.y == 60

    def test_empty(self):
        assert layout([], []) == []


class TestMermaid:
    def test_render(self):
        forest = (dir_entry("/src", file_entry("/src/app.py")),)
        nodes, edges = build_graph(forest)
        assert to_mermaid(nodes, edges) == (
            "graph TD\n"
            '    n_src["src/"]\n'
            '    n_src_app_py("app.py")\n'
            "    n_src --> n_src_app_py\n"
        )

    def test_colliding_ids_get_suffix(self):
        nodes = [_node("/a-b"), _node("/a_b")]
        text = to_mermaid(nodes, [])
        assert "n_a_b(" in text
        assert "n_a_b_2(" in text

    def test_quotes_escaped(self):
        text = to_mermaid([_node('/say"hi"')], [])
        assert "#quot;" in text
