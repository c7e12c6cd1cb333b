"""
Per-cluster keyword connectivity graphs.

A cluster graph has the cluster's keywords as nodes and an edge for every
co-occurring pair whose endpoints are both members. Edge weights are
normalized against the corpus-wide maximum pair count, not the cluster's,
so weights compare across clusters.

Every edge is upserted as a KeywordConnection. A failed write is logged
and counted in the returned ConnectionWriteResult; it does not stop the
remaining writes.
"""
import logging
from dataclasses import dataclass, field

from ..core.exceptions import PersistenceError
from ..core.schemas import (
    ConnectionStrength,
    Graph,
    GraphEdge,
    GraphNode,
    KeywordCluster,
    KeywordConnection,
)
from .cooccurrence import CoOccurrence, find_cooccurrences, max_cooccurrence

logger = logging.getLogger(__name__)


@dataclass
class ConnectionWriteResult:
    """Outcome of a batch of connection upserts."""
    written: int = 0
    failed: int = 0
    first_error: PersistenceError | None = None

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def record_failure(self, error: PersistenceError):
        self.failed += 1
        if self.first_error is None:
            self.first_error = error

    def merge(self, other: "ConnectionWriteResult"):
        self.written += other.written
        self.failed += other.failed
        if self.first_error is None:
            self.first_error = other.first_error

    def to_dict(self) -> dict:
        return {
            "written": self.written,
            "failed": self.failed,
            "first_error": str(self.first_error) if self.first_error else None,
        }


@dataclass
class ConnectivityBuild:
    """Graphs built for a set of clusters plus the aggregate write outcome."""
    graphs: dict[str, Graph] = field(default_factory=dict)
    writes: ConnectionWriteResult = field(default_factory=ConnectionWriteResult)


def edge_weight(count: int, max_count: int) -> float:
    return count / max(max_count, 1)


def build_cluster_graph(
    cluster: KeywordCluster,
    pairs: dict[tuple[str, str], CoOccurrence],
    max_count: int | None = None,
) -> tuple[Graph, list[KeywordConnection]]:
    """
    Project the corpus pair index onto one cluster.

    Args:
        cluster: Cluster whose members become nodes
        pairs: Corpus-wide co-occurrence index
        max_count: Corpus-wide maximum pair count (computed if omitted)

    Returns:
        (graph, connections) with one connection per edge
    """
    if max_count is None:
        max_count = max_cooccurrence(pairs)

    members = set(cluster.keywords)
    nodes = [
        GraphNode(id=keyword, label=keyword, cluster_id=cluster.cluster_id)
        for keyword in cluster.keywords
    ]
    edges = []
    connections = []

    for (source, target), entry in pairs.items():
        if source not in members or target not in members:
            continue

        weight = edge_weight(entry.count, max_count)
        edges.append(GraphEdge(
            source=source,
            target=target,
            weight=weight,
            co_occurrence_count=entry.count,
            papers=list(entry.papers),
        ))
        connections.append(KeywordConnection(
            source_keyword=source,
            target_keyword=target,
            co_occurrence_count=entry.count,
            weight=weight,
            papers=list(entry.papers),
            cluster_id=cluster.cluster_id,
            strength=ConnectionStrength.from_weight(weight),
        ))

    return Graph(nodes=nodes, edges=edges), connections


class ClusterGraphBuilder:
    """
    Builds cluster graphs from the corpus and persists their connections.

    Reads papers from a corpus source (anything with get_papers()) and
    clusters/connections from an AnalyticsStore.
    """

    def __init__(self, corpus, store):
        self.corpus = corpus
        self.store = store

    def _pair_index(self) -> tuple[dict[tuple[str, str], CoOccurrence], int]:
        pairs = find_cooccurrences(self.corpus.get_papers())
        return pairs, max_cooccurrence(pairs)

    def _persist_connections(self, connections: list[KeywordConnection]) -> ConnectionWriteResult:
        result = ConnectionWriteResult()
        for connection in connections:
            try:
                self.store.upsert_connection(connection)
                result.written += 1
            except PersistenceError as e:
                logger.error(
                    f"Error saving connection {connection.source_keyword} -- "
                    f"{connection.target_keyword}: {e}"
                )
                result.record_failure(e)
        return result

    def build_cluster_graph(
        self,
        cluster_id: str,
        pairs: dict[tuple[str, str], CoOccurrence] | None = None,
        max_count: int | None = None,
    ) -> tuple[Graph, ConnectionWriteResult]:
        """
        Build and persist the connectivity graph of one cluster.

        Raises:
            NotFoundError: if the cluster does not exist
        """
        cluster = self.store.get_cluster(cluster_id)
        if pairs is None:
            pairs, max_count = self._pair_index()

        graph, connections = build_cluster_graph(cluster, pairs, max_count)
        writes = self._persist_connections(connections)

        logger.debug(
            f"{cluster_id}: {len(graph.nodes)} nodes, {len(graph.edges)} edges, "
            f"{writes.written} connections saved"
        )
        return graph, writes

    def build_all_cluster_graphs(self) -> ConnectivityBuild:
        """Build graphs for every stored cluster from one shared pair index."""
        clusters = self.store.get_clusters()
        pairs, max_count = self._pair_index()
        build = ConnectivityBuild()

        for cluster in clusters:
            graph, writes = self.build_cluster_graph(cluster.cluster_id, pairs, max_count)
            build.graphs[cluster.cluster_id] = graph
            build.writes.merge(writes)

        if not build.writes.ok:
            logger.warning(
                f"{build.writes.failed} connection writes failed "
                f"(first error: {build.writes.first_error})"
            )
        logger.info(
            f"Generated connectivity graphs for {len(build.graphs)} clusters "
            f"({build.writes.written} connections)"
        )
        return build

    def get_cluster_graph(self, cluster_id: str) -> Graph:
        """Rebuild a cluster graph from persisted connections."""
        cluster = self.store.get_cluster(cluster_id)
        nodes = [
            GraphNode(id=keyword, label=keyword, cluster_id=cluster_id)
            for keyword in cluster.keywords
        ]
        edges = [
            GraphEdge(
                source=conn.source_keyword,
                target=conn.target_keyword,
                weight=conn.weight,
                co_occurrence_count=conn.co_occurrence_count,
                papers=conn.papers,
            )
            for conn in self.store.get_connections(cluster_id=cluster_id)
        ]
        return Graph(nodes=nodes, edges=edges)

    def list_connections(self, cluster_id: str | None = None, limit: int | None = None) -> list[KeywordConnection]:
        return self.store.get_connections(cluster_id=cluster_id, limit=limit)

    def clear_connections(self) -> int:
        return self.store.clear_connections()
