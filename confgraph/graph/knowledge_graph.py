"""
Unified knowledge graph.

Merges every cluster and every persisted keyword connection into one graph:
- keyword nodes (first cluster listing a keyword owns it)
- one node per cluster, linked to its members by hierarchy edges
- co-occurrence edges from the connection table

Then attaches statistics and analysis from graph.metrics and stores the
result as a new KnowledgeGraph document.
"""
import logging

from ..core.exceptions import InputError
from ..core.schemas import (
    KeywordCluster,
    KeywordConnection,
    KnowledgeGraph,
    KnowledgeGraphEdge,
    KnowledgeGraphNode,
    YearRange,
)
from .metrics import analyze_graph

logger = logging.getLogger(__name__)

KNOWLEDGE_GRAPH_NAME = "Unified Research Knowledge Graph"
KNOWLEDGE_GRAPH_DESCRIPTION = (
    "Unified knowledge graph combining all thematic clusters and keyword relationships"
)
KNOWLEDGE_GRAPH_VERSION = "1.0"


def cluster_node_id(cluster_id: str) -> str:
    return f"cluster_{cluster_id}"


def _edge_key(source: str, target: str) -> str:
    # Directional: "a-->b" and "b-->a" are different keys
    return f"{source}-->{target}"


def merge_knowledge_graph(
    clusters: list[KeywordCluster],
    connections: list[KeywordConnection],
) -> tuple[list[KnowledgeGraphNode], list[KnowledgeGraphEdge]]:
    """
    Merge clusters and connections into knowledge graph nodes and edges.

    Args:
        clusters: Clusters in storage order
        connections: Persisted keyword connections

    Returns:
        (nodes, edges) with node ids unique and edge keys unique
    """
    nodes: list[KnowledgeGraphNode] = []
    edges: list[KnowledgeGraphEdge] = []
    node_ids: set[str] = set()
    edge_keys: set[str] = set()

    for cluster in clusters:
        for keyword in cluster.keywords:
            if keyword in node_ids:
                continue
            node_ids.add(keyword)
            nodes.append(KnowledgeGraphNode(
                id=keyword,
                label=keyword,
                type="keyword",
                cluster_id=cluster.cluster_id,
                properties={"cluster": cluster.name, "theme": cluster.theme},
            ))

        hub_id = cluster_node_id(cluster.cluster_id)
        if hub_id not in node_ids:
            node_ids.add(hub_id)
            nodes.append(KnowledgeGraphNode(
                id=hub_id,
                label=cluster.name or cluster.theme or "Unknown",
                type="cluster",
                properties={
                    "size": cluster.size,
                    "confidence": cluster.confidence,
                    "theme": cluster.theme,
                },
            ))

        for keyword in cluster.keywords:
            key = _edge_key(keyword, hub_id)
            if key in edge_keys:
                continue
            edge_keys.add(key)
            edges.append(KnowledgeGraphEdge(source=keyword, target=hub_id, weight=1.0, type="hierarchy"))

    for conn in connections:
        key = _edge_key(conn.source_keyword, conn.target_keyword)
        if key in edge_keys:
            continue
        edge_keys.add(key)
        edges.append(KnowledgeGraphEdge(
            source=conn.source_keyword,
            target=conn.target_keyword,
            weight=conn.weight,
            type="co-occurrence",
            properties={
                "co_occurrence_count": conn.co_occurrence_count,
                "strength": conn.strength.value,
            },
        ))

    return nodes, edges


class KnowledgeGraphUnifier:
    """
    Builds and stores the unified knowledge graph.

    Example:
        unifier = KnowledgeGraphUnifier(store, corpus)
        graph = unifier.build_unified_knowledge_graph()
        print(graph.statistics.node_count)
    """

    def __init__(self, store, corpus=None, central_top_n: int = 10, hub_top_n: int = 10):
        """
        Args:
            store: AnalyticsStore holding clusters, connections and graphs
            corpus: Optional paper source with get_year_range() for provenance
            central_top_n: Central nodes kept in the analysis block
            hub_top_n: Hub nodes kept in the analysis block
        """
        self.store = store
        self.corpus = corpus
        self.central_top_n = central_top_n
        self.hub_top_n = hub_top_n

    def _year_range(self) -> YearRange:
        if self.corpus is None:
            return YearRange()
        start, end = self.corpus.get_year_range()
        return YearRange(start=start, end=end)

    def build_unified_knowledge_graph(self) -> KnowledgeGraph:
        """
        Merge all clusters and connections and persist the result.

        Raises:
            InputError: if no clusters exist yet
        """
        logger.info("Building unified knowledge graph...")

        clusters = self.store.get_clusters(by_size=False)
        if not clusters:
            raise InputError("No clusters found. Please run clustering first.")

        nodes, edges = merge_knowledge_graph(clusters, self.store.get_connections())
        logger.info(f"Knowledge graph: {len(nodes)} nodes, {len(edges)} edges")

        statistics, analysis = analyze_graph(
            nodes, edges,
            central_top_n=self.central_top_n,
            hub_top_n=self.hub_top_n,
        )

        graph = KnowledgeGraph(
            name=KNOWLEDGE_GRAPH_NAME,
            description=KNOWLEDGE_GRAPH_DESCRIPTION,
            version=KNOWLEDGE_GRAPH_VERSION,
            nodes=nodes,
            edges=edges,
            statistics=statistics,
            analysis=analysis,
            source_clusters=[c.cluster_id for c in clusters],
            year_range=self._year_range(),
        )
        self.store.save_knowledge_graph(graph)

        logger.info(
            f"Knowledge graph saved: {statistics.components} components, "
            f"density {statistics.density}"
        )
        return graph

    def rebuild_knowledge_graph(self) -> KnowledgeGraph:
        """Clear stored graphs, then build a fresh one (not atomic)."""
        self.clear_knowledge_graphs()
        return self.build_unified_knowledge_graph()

    def get_knowledge_graph(self) -> KnowledgeGraph | None:
        return self.store.get_knowledge_graph()

    def clear_knowledge_graphs(self) -> int:
        return self.store.clear_knowledge_graphs()
