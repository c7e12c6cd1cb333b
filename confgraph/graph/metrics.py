"""
NetworkX graph metrics for ConfGraph.

Pure functions over an abstract (nodes, edges) graph:
- Statistics: density, average degree, clustering coefficient, components
- Centrality: degree, closeness, and a distance-accumulation proxy
- Hub nodes and connected-component communities

Nodes may be strings, dicts with an "id" key, or objects with an ``id``
attribute; edges likewise expose ``source``/``target``. Parallel and
reverse edges are kept (a MultiGraph), so they count toward degree and
density. Edges touching a node that is not in the node list are ignored.
"""
import logging
from typing import Any, Iterable

import networkx as nx

from ..core.schemas import CentralNode, Community, GraphAnalysis, GraphStatistics

logger = logging.getLogger(__name__)


def _field(item: Any, name: str):
    if isinstance(item, dict):
        return item[name]
    return getattr(item, name)


def _node_id(node: Any) -> str:
    return node if isinstance(node, str) else _field(node, "id")


# ── Graph Builders ──────────────────────────────────────────────

def to_networkx(nodes: Iterable[Any], edges: Iterable[Any]) -> nx.MultiGraph:
    """Build an undirected multigraph, keeping node input order."""
    G = nx.MultiGraph()
    for node in nodes:
        G.add_node(_node_id(node))

    dangling = 0
    for edge in edges:
        source, target = _field(edge, "source"), _field(edge, "target")
        if source in G and target in G:
            G.add_edge(source, target)
        else:
            dangling += 1

    if dangling:
        logger.debug(f"Ignored {dangling} edges with endpoints outside the node list")
    return G


def _simple(G: nx.MultiGraph) -> nx.Graph:
    """Collapse parallel edges and drop self-loops."""
    simple = nx.Graph(G)
    simple.remove_edges_from(list(nx.selfloop_edges(simple)))
    return simple


# ── Statistics ──────────────────────────────────────────────────

def graph_density(G: nx.MultiGraph) -> float:
    """|E| / (|V|(|V|-1)/2); 0 for fewer than two nodes."""
    return nx.density(G)


def average_degree(G: nx.MultiGraph) -> float:
    n = G.number_of_nodes()
    if n == 0:
        return 0.0
    return sum(d for _, d in G.degree()) / n


def clustering_coefficient(G: nx.MultiGraph) -> float:
    """
    Mean local clustering over nodes with at least two distinct neighbours.

    Nodes with fewer neighbours are left out of the average rather than
    counted as zero.
    """
    simple = _simple(G)
    eligible = [v for v in simple if simple.degree(v) >= 2]
    if not eligible:
        return 0.0
    coefficients = nx.clustering(simple, eligible)
    return sum(coefficients.values()) / len(eligible)


def count_components(G: nx.MultiGraph) -> int:
    if G.number_of_nodes() == 0:
        return 0
    return nx.number_connected_components(G)


def graph_statistics(G: nx.MultiGraph) -> GraphStatistics:
    return GraphStatistics(
        node_count=G.number_of_nodes(),
        edge_count=G.number_of_edges(),
        density=round(graph_density(G), 4),
        average_degree=round(average_degree(G), 2),
        clustering_coefficient=round(clustering_coefficient(G), 4),
        components=count_components(G),
    )


# ── Centrality ──────────────────────────────────────────────────

def degree_centrality(G: nx.MultiGraph) -> dict[str, float]:
    """Raw degree divided by the largest degree in the graph."""
    degrees = dict(G.degree())
    max_degree = max(max(degrees.values(), default=0), 1)
    return {node: degree / max_degree for node, degree in degrees.items()}


def distance_centrality(
    G: nx.MultiGraph,
    lengths: dict[str, dict[str, int]] | None = None,
) -> dict[str, float]:
    """
    Sum of BFS distances to each node from every other node, normalized.

    Unreachable pairs contribute nothing. This rewards nodes that are far
    from many others and is a proxy, not betweenness centrality.
    """
    if lengths is None:
        lengths = dict(nx.all_pairs_shortest_path_length(G))

    totals = {node: 0 for node in G}
    for source, distances in lengths.items():
        for target, distance in distances.items():
            if target != source:
                totals[target] += distance

    max_total = max(max(totals.values(), default=0), 1)
    return {node: total / max_total for node, total in totals.items()}


def closeness_centrality(
    G: nx.MultiGraph,
    lengths: dict[str, dict[str, int]] | None = None,
) -> dict[str, float]:
    """1 / mean distance from a node to every node it can reach; 0 if none."""
    if lengths is None:
        lengths = dict(nx.all_pairs_shortest_path_length(G))

    scores = {}
    for node in G:
        others = [d for target, d in lengths.get(node, {}).items() if target != node]
        scores[node] = len(others) / sum(others) if others else 0.0
    return scores


def centrality_scores(G: nx.MultiGraph) -> list[CentralNode]:
    """Degree, distance and closeness centrality per node, in node order."""
    lengths = dict(nx.all_pairs_shortest_path_length(G))
    degree = degree_centrality(G)
    distance = distance_centrality(G, lengths)
    closeness = closeness_centrality(G, lengths)

    return [
        CentralNode(
            node_id=node,
            distance_centrality=distance[node],
            closeness_centrality=closeness[node],
            degree_centrality=degree[node],
        )
        for node in G
    ]


def central_nodes(G: nx.MultiGraph, top_n: int = 10) -> list[CentralNode]:
    """Nodes ranked by degree + distance centrality (stable on ties)."""
    scores = centrality_scores(G)
    scores.sort(key=lambda s: s.degree_centrality + s.distance_centrality, reverse=True)
    return scores[:top_n]


def degree_ranked_nodes(G: nx.MultiGraph, top_n: int = 5) -> list[CentralNode]:
    """Top-N nodes by raw degree with their scores; ties keep input order."""
    scores = {s.node_id: s for s in centrality_scores(G)}
    return [scores[node] for node in hub_nodes(G, top_n)]


# ── Hubs & Communities ──────────────────────────────────────────

def hub_nodes(G: nx.MultiGraph, top_n: int = 10) -> list[str]:
    """Top-N node ids by raw degree; ties keep input order."""
    return sorted(G, key=lambda node: G.degree(node), reverse=True)[:top_n]


def detect_communities(G: nx.MultiGraph) -> list[Community]:
    """
    Connected components as communities, no modularity refinement.

    Communities appear in the order of their first node, and list their
    members in node input order.
    """
    position = {node: i for i, node in enumerate(G)}
    communities = []
    for i, component in enumerate(nx.connected_components(G)):
        members = sorted(component, key=position.__getitem__)
        communities.append(Community(community_id=f"community_{i}", nodes=members, size=len(members)))
    return communities


def analyze_graph(
    nodes: Iterable[Any],
    edges: Iterable[Any],
    central_top_n: int = 10,
    hub_top_n: int = 10,
) -> tuple[GraphStatistics, GraphAnalysis]:
    """Compute the statistics and analysis blocks for a graph."""
    G = to_networkx(nodes, edges)
    analysis = GraphAnalysis(
        central_nodes=central_nodes(G, central_top_n),
        communities=detect_communities(G),
        hub_nodes=hub_nodes(G, hub_top_n),
    )
    return graph_statistics(G), analysis
