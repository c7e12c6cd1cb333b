"""
Report pipeline: chains clustering, connectivity graphs and the unified graph.

    generate_all()
        clear clusters      -> cluster keywords
        clear connections   -> build every cluster graph
        clear knowledge graphs -> build unified knowledge graph

Stages run in order with no rollback. If a stage fails after its clear,
that artifact stays empty until the next successful run. Runs against the
same database file are serialized within a process.
"""
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from ..clustering.kmeans import KeywordClusterer
from ..core.config import Settings, get_settings
from ..core.schemas import CentralNode, Community, Graph, GraphStatistics, KeywordCluster, KnowledgeGraph
from ..graph.cluster_graph import ClusterGraphBuilder, ConnectionWriteResult, ConnectivityBuild
from ..graph.knowledge_graph import KnowledgeGraphUnifier
from ..graph.metrics import degree_ranked_nodes, detect_communities, graph_statistics, to_networkx
from ..storage.analytics_store import AnalyticsStore
from ..storage.corpus_index import CorpusIndex

logger = logging.getLogger(__name__)

_run_locks: dict[str, threading.Lock] = {}
_run_locks_guard = threading.Lock()


def pipeline_lock(db_path: str | Path) -> threading.Lock:
    """Process-wide lock shared by every pipeline on the same database."""
    key = str(Path(db_path).resolve())
    with _run_locks_guard:
        if key not in _run_locks:
            _run_locks[key] = threading.Lock()
        return _run_locks[key]


@dataclass
class PipelineReport:
    """Result of a full generate-all run."""
    clusters_count: int
    connections: ConnectionWriteResult
    knowledge_graph: KnowledgeGraph

    def to_dict(self) -> dict[str, Any]:
        return {
            "clusters_count": self.clusters_count,
            "connections": self.connections.to_dict(),
            "knowledge_graph": self.knowledge_graph.model_dump(mode="json"),
        }


@dataclass
class ClusterReport:
    """One cluster with its graph and graph analysis."""
    cluster: KeywordCluster
    graph: Graph
    statistics: GraphStatistics
    central_nodes: list[CentralNode] = field(default_factory=list)
    communities: list[Community] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cluster": self.cluster.model_dump(mode="json"),
            "graph": self.graph.model_dump(mode="json"),
            "statistics": self.statistics.model_dump(),
            "central_nodes": [n.model_dump() for n in self.central_nodes],
            "communities": [c.model_dump() for c in self.communities],
        }


class ReportPipeline:
    """
    Runs the analytics stages against one corpus and analytics store.

    Example:
        pipeline = ReportPipeline.from_settings()
        report = pipeline.generate_all(k=8)
        print(report.knowledge_graph.statistics)
    """

    def __init__(
        self,
        corpus,
        store: AnalyticsStore,
        settings: Settings | None = None,
        rng: np.random.Generator | None = None,
    ):
        """
        Args:
            corpus: Keyword and paper source (e.g. CorpusIndex)
            store: Analytics store for clusters, connections and graphs
            settings: Analytics parameters (defaults to get_settings())
            rng: Random source for centroid seeding; falls back to
                the configured random_seed
        """
        self.corpus = corpus
        self.store = store
        self.settings = settings or get_settings()

        analytics = self.settings.analytics
        if rng is None:
            rng = np.random.default_rng(analytics.random_seed)

        self.clusterer = KeywordClusterer(corpus, store, rng=rng, max_iterations=analytics.max_iterations)
        self.graph_builder = ClusterGraphBuilder(corpus, store)
        self.unifier = KnowledgeGraphUnifier(
            store,
            corpus,
            central_top_n=analytics.central_top_n,
            hub_top_n=analytics.hub_top_n,
        )
        self._lock = pipeline_lock(store.db_path)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ReportPipeline":
        """Open the configured database for both corpus and analytics."""
        settings = settings or get_settings()
        db_path = settings.storage.resolve(settings.project_root).db_path
        return cls(CorpusIndex(db_path), AnalyticsStore(db_path), settings=settings)

    # --------------------------------------------------------
    # Stages
    # --------------------------------------------------------

    def cluster_keywords(self, k: int | None = None, keyword_limit: int | None = None) -> list[KeywordCluster]:
        """Replace stored clusters with a fresh clustering run."""
        analytics = self.settings.analytics
        if k is None:
            k = analytics.cluster_count
        if keyword_limit is None:
            keyword_limit = analytics.keyword_limit

        self.clusterer.clear_clusters()
        self.clusterer.cluster_keywords(k=k, keyword_limit=keyword_limit)
        return self.clusterer.get_clusters()

    def build_connectivity_graphs(self) -> ConnectivityBuild:
        """Replace stored connections with graphs for every cluster."""
        self.graph_builder.clear_connections()
        return self.graph_builder.build_all_cluster_graphs()

    def build_knowledge_graph(self) -> KnowledgeGraph:
        """Replace stored knowledge graphs with a freshly unified one."""
        return self.unifier.rebuild_knowledge_graph()

    def generate_all(self, k: int | None = None, keyword_limit: int | None = None) -> PipelineReport:
        """
        Run every stage in order.

        Raises:
            ConfGraphError: from the failing stage, after logging
        """
        with self._lock:
            try:
                logger.info("Starting complete report generation pipeline...")

                logger.info("Step 1: Clustering keywords...")
                clusters = self.cluster_keywords(k=k, keyword_limit=keyword_limit)
                logger.info(f"Generated {len(clusters)} clusters")

                logger.info("Step 2: Building connectivity graphs...")
                build = self.build_connectivity_graphs()

                logger.info("Step 3: Building unified knowledge graph...")
                knowledge_graph = self.build_knowledge_graph()

            except Exception:
                logger.exception("pipeline failed")
                raise

        logger.info("Report generation pipeline finished")
        return PipelineReport(
            clusters_count=len(clusters),
            connections=build.writes,
            knowledge_graph=knowledge_graph,
        )

    # --------------------------------------------------------
    # Reports
    # --------------------------------------------------------

    def cluster_report(self, cluster_id: str, top_n: int | None = None) -> ClusterReport:
        """
        Analyze one cluster's persisted connectivity graph.

        Central nodes are the top-N by raw degree, not the degree + distance
        ranking used for the unified graph.

        Raises:
            NotFoundError: if the cluster does not exist
        """
        top_n = top_n or self.settings.analytics.cluster_top_n
        cluster = self.store.get_cluster(cluster_id)
        graph = self.graph_builder.get_cluster_graph(cluster_id)
        G = to_networkx(graph.nodes, graph.edges)
        return ClusterReport(
            cluster=cluster,
            graph=graph,
            statistics=graph_statistics(G),
            central_nodes=degree_ranked_nodes(G, top_n),
            communities=detect_communities(G),
        )

    def status(self) -> dict[str, Any]:
        stats = self.store.get_stats()
        stats["keywords_count"] = self.corpus.count_keywords()
        stats["papers_count"] = self.corpus.count_papers()
        return stats

    def clear_all(self) -> dict[str, int]:
        """Delete every generated artifact; the corpus is untouched."""
        with self._lock:
            return {
                "clusters": self.store.clear_clusters(),
                "connections": self.store.clear_connections(),
                "knowledge_graphs": self.store.clear_knowledge_graphs(),
            }
