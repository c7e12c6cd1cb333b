"""
Core module - Configuration, schemas, and exceptions.
"""
from .config import Settings, get_settings
from .exceptions import (
    ConfGraphError,
    InputError,
    EmptyCorpusError,
    NotFoundError,
    PersistenceError,
)
from .schemas import (
    KeywordRecord,
    PaperRecord,
    ConnectionStrength,
    KeywordCluster,
    KeywordConnection,
    GraphNode,
    GraphEdge,
    Graph,
    KnowledgeGraph,
)

__all__ = [
    "Settings",
    "get_settings",
    "ConfGraphError",
    "InputError",
    "EmptyCorpusError",
    "NotFoundError",
    "PersistenceError",
    "KeywordRecord",
    "PaperRecord",
    "ConnectionStrength",
    "KeywordCluster",
    "KeywordConnection",
    "GraphNode",
    "GraphEdge",
    "Graph",
    "KnowledgeGraph",
]
