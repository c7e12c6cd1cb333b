"""
Graph module - Co-occurrence, cluster graphs, metrics and the unified knowledge graph.
"""
from .cooccurrence import CoOccurrence, canonical_pair, find_cooccurrences, max_cooccurrence
from .cluster_graph import (
    ClusterGraphBuilder,
    ConnectionWriteResult,
    ConnectivityBuild,
    build_cluster_graph,
    edge_weight,
)
from .metrics import analyze_graph, degree_ranked_nodes, graph_statistics, to_networkx
from .knowledge_graph import KnowledgeGraphUnifier, merge_knowledge_graph

__all__ = [
    "CoOccurrence",
    "canonical_pair",
    "find_cooccurrences",
    "max_cooccurrence",
    "ClusterGraphBuilder",
    "ConnectionWriteResult",
    "ConnectivityBuild",
    "build_cluster_graph",
    "edge_weight",
    "analyze_graph",
    "degree_ranked_nodes",
    "graph_statistics",
    "to_networkx",
    "KnowledgeGraphUnifier",
    "merge_knowledge_graph",
]
