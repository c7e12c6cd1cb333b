"""
Unit tests for NetworkX graph metrics.
"""
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from confgraph.core.schemas import GraphEdge, GraphNode
from confgraph.graph.metrics import (
    analyze_graph,
    central_nodes,
    degree_ranked_nodes,
    closeness_centrality,
    degree_centrality,
    distance_centrality,
    graph_statistics,
    to_networkx,
)


def edge(source, target):
    return {"source": source, "target": target}


@pytest.fixture
def path_graph():
    """a - b - c"""
    return to_networkx(["a", "b", "c"], [edge("a", "b"), edge("b", "c")])


class TestStatistics:
    """Tests for the statistics block."""

    def test_triangle_is_complete(self):
        G = to_networkx(["a", "b", "c"], [edge("a", "b"), edge("b", "c"), edge("a", "c")])
        stats = graph_statistics(G)

        assert stats.density == 1.0
        assert stats.average_degree == 2.0
        assert stats.clustering_coefficient == 1.0
        assert stats.components == 1

    def test_path_rounding(self, path_graph):
        stats = graph_statistics(path_graph)

        assert stats.density == 0.6667
        assert stats.average_degree == 1.33
        assert stats.clustering_coefficient == 0.0

    def test_single_node_density_zero(self):
        stats = graph_statistics(to_networkx(["solo"], []))
        assert stats.density == 0.0
        assert stats.components == 1

    def test_empty_graph(self):
        stats = graph_statistics(to_networkx([], []))
        assert stats.node_count == 0
        assert stats.density == 0.0
        assert stats.average_degree == 0.0
        assert stats.components == 0

    def test_parallel_edges_count(self):
        stats = graph_statistics(to_networkx(["a", "b"], [edge("a", "b"), edge("b", "a")]))

        assert stats.edge_count == 2
        assert stats.density == 2.0
        assert stats.average_degree == 2.0

    def test_dangling_edges_ignored(self):
        stats = graph_statistics(to_networkx(["a", "b"], [edge("a", "b"), edge("a", "ghost")]))
        assert stats.edge_count == 1

    def test_clustering_skips_low_degree_nodes(self):
        # Triangle plus pendant d on c: a, b -> 1.0; c -> 1/3; d excluded
        G = to_networkx(
            ["a", "b", "c", "d"],
            [edge("a", "b"), edge("b", "c"), edge("a", "c"), edge("c", "d")],
        )
        assert graph_statistics(G).clustering_coefficient == pytest.approx(0.7778)


class TestCentrality:
    """Tests for the centrality measures on a three-node path."""

    def test_degree(self, path_graph):
        assert degree_centrality(path_graph) == {"a": 0.5, "b": 1.0, "c": 0.5}

    def test_distance(self, path_graph):
        scores = distance_centrality(path_graph)
        assert scores["a"] == 1.0
        assert scores["b"] == pytest.approx(2 / 3)
        assert scores["c"] == 1.0

    def test_closeness_excludes_self(self, path_graph):
        scores = closeness_centrality(path_graph)
        assert scores["a"] == pytest.approx(2 / 3)
        assert scores["b"] == 1.0

    def test_isolated_node_scores_zero(self):
        G = to_networkx(["solo"], [])
        assert closeness_centrality(G) == {"solo": 0.0}
        assert distance_centrality(G) == {"solo": 0.0}
        assert degree_centrality(G) == {"solo": 0.0}

    def test_unreachable_pairs_add_nothing(self):
        G = to_networkx(["a", "b", "c"], [edge("a", "b")])
        assert distance_centrality(G) == {"a": 1.0, "b": 1.0, "c": 0.0}

    def test_ranking_and_top_n(self, path_graph):
        ranked = central_nodes(path_graph, top_n=2)
        assert [n.node_id for n in ranked] == ["b", "a"]


class TestDegreeRankedNodes:
    """Degree-only ranking used by per-cluster reports."""

    @pytest.fixture
    def two_hub_graph(self):
        # n1 and n2 have degree 3; n0 has degree 2 but the largest distance sum
        return to_networkx(
            [f"n{i}" for i in range(7)],
            [
                edge("n0", "n3"), edge("n0", "n4"), edge("n1", "n2"), edge("n1", "n3"),
                edge("n1", "n4"), edge("n2", "n5"), edge("n2", "n6"),
            ],
        )

    def test_rankings_disagree(self, two_hub_graph):
        assert central_nodes(two_hub_graph, top_n=1)[0].node_id == "n0"
        assert degree_ranked_nodes(two_hub_graph, top_n=1)[0].node_id == "n1"

    def test_ties_keep_input_order(self, two_hub_graph):
        ranked = degree_ranked_nodes(two_hub_graph, top_n=3)

        assert [n.node_id for n in ranked][:2] == ["n1", "n2"]
        assert ranked[0].degree_centrality == 1.0
        assert ranked[2].degree_centrality == pytest.approx(2 / 3)

    def test_scores_are_kept(self, two_hub_graph):
        top = degree_ranked_nodes(two_hub_graph, top_n=1)[0]
        assert top.distance_centrality == pytest.approx(9 / 15)
        assert top.closeness_centrality == pytest.approx(6 / 9)


class TestAnalyzeGraph:
    """Tests for analyze_graph() over model inputs."""

    def test_single_isolated_keyword(self):
        stats, analysis = analyze_graph([GraphNode(id="security", label="security")], [])

        assert stats.node_count == 1
        assert stats.edge_count == 0
        assert stats.density == 0.0
        assert analysis.hub_nodes == ["security"]
        assert len(analysis.communities) == 1
        assert analysis.communities[0].size == 1
        assert analysis.communities[0].nodes == ["security"]

    def test_components_match_communities(self):
        nodes = [GraphNode(id=k, label=k) for k in ["d", "a", "b", "c"]]
        edges = [GraphEdge(source="a", target="d"), GraphEdge(source="b", target="c")]
        stats, analysis = analyze_graph(nodes, edges)

        assert stats.components == len(analysis.communities) == 2
        assert [c.nodes for c in analysis.communities] == [["d", "a"], ["b", "c"]]
        assert [c.community_id for c in analysis.communities] == ["community_0", "community_1"]

    def test_hub_ties_keep_input_order(self):
        nodes = [{"id": k} for k in ["x", "y", "hub", "z"]]
        edges = [edge("hub", "x"), edge("hub", "y"), edge("hub", "z")]
        _, analysis = analyze_graph(nodes, edges, hub_top_n=3)

        assert analysis.hub_nodes == ["hub", "x", "y"]
