"""
Pydantic schemas for corpus records and analytics artifacts.

Read side (external): KeywordRecord, PaperRecord.
Write side (persisted): KeywordCluster, KeywordConnection, KnowledgeGraph.
Ephemeral: Graph (per-cluster co-occurrence graph).
"""
from datetime import datetime
from enum import Enum
from typing import Any, Literal
from pydantic import BaseModel, Field


# ============================================================
# Corpus records (read contracts)
# ============================================================

class KeywordRecord(BaseModel):
    """A unique keyword and the papers that use it."""
    keyword: str = Field(..., min_length=1, description="Keyword text (unique)")
    papers: list[str] = Field(default_factory=list, description="Associated paper ids")
    count: int = Field(default=0, ge=0, description="Occurrence count")

    @property
    def paper_count(self) -> int:
        return len(self.papers)


class PaperRecord(BaseModel):
    """A paper reduced to what the analytics need."""
    id: str = Field(..., description="Paper identifier")
    keywords: list[str] = Field(default_factory=list, description="Ordered keyword texts")
    title: str | None = None
    year: int | None = Field(None, description="Publication year, used for provenance")
    conference: str | None = None


# ============================================================
# Clusters
# ============================================================

class ClusterProperties(BaseModel):
    """Paper-count aggregates for a cluster."""
    dominant_paper_count: int = Field(default=0, description="Largest paper count of any member")
    avg_papers_per_keyword: float = Field(default=0.0, description="Mean paper count, 2 dp")


class KeywordCluster(BaseModel):
    """A thematic keyword cluster produced by one clustering run."""
    cluster_id: str = Field(..., description="cluster_<index>")
    name: str
    description: str | None = None
    keywords: list[str] = Field(default_factory=list)
    centroid: list[float] = Field(default_factory=list)
    size: int = Field(default=0, ge=0)
    papers_count: int = Field(default=0, ge=0, description="Sum of member paper counts")
    theme: str | None = Field(None, description="Human-readable theme label")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    properties: ClusterProperties = Field(default_factory=ClusterProperties)
    updated_at: datetime = Field(default_factory=datetime.now)


# ============================================================
# Connections
# ============================================================

class ConnectionStrength(str, Enum):
    """Qualitative bucket for a normalized connection weight."""
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"

    @classmethod
    def from_weight(cls, weight: float) -> "ConnectionStrength":
        # Strict comparisons: a weight sitting on a threshold takes the lower bucket
        if weight > 0.66:
            return cls.STRONG
        if weight > 0.33:
            return cls.MEDIUM
        return cls.WEAK


class KeywordConnection(BaseModel):
    """Persisted co-occurrence between two keywords of one cluster."""
    source_keyword: str
    target_keyword: str
    co_occurrence_count: int = Field(default=1, ge=0, description="Papers containing both keywords")
    weight: float = Field(default=0.0, ge=0.0, le=1.0, description="count / corpus-wide max count")
    papers: list[str] = Field(default_factory=list)
    cluster_id: str | None = None
    strength: ConnectionStrength = ConnectionStrength.WEAK
    updated_at: datetime = Field(default_factory=datetime.now)


# ============================================================
# Ephemeral cluster graph
# ============================================================

class GraphNode(BaseModel):
    id: str
    label: str
    cluster_id: str | None = None


class GraphEdge(BaseModel):
    source: str
    target: str
    weight: float = 0.0
    co_occurrence_count: int = 0
    papers: list[str] = Field(default_factory=list)


class Graph(BaseModel):
    """Keyword co-occurrence graph restricted to one cluster."""
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)


# ============================================================
# Knowledge graph
# ============================================================

class KnowledgeGraphNode(BaseModel):
    id: str
    label: str
    type: Literal["keyword", "cluster", "theme"] = "keyword"
    cluster_id: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class KnowledgeGraphEdge(BaseModel):
    source: str
    target: str
    weight: float = 1.0
    type: Literal["co-occurrence", "hierarchy", "related"] = "co-occurrence"
    properties: dict[str, Any] = Field(default_factory=dict)


class GraphStatistics(BaseModel):
    node_count: int = 0
    edge_count: int = 0
    density: float = 0.0
    average_degree: float = 0.0
    clustering_coefficient: float = 0.0
    components: int = 0


class CentralNode(BaseModel):
    """Centrality scores for one node.

    distance_centrality is a shortest-path distance accumulation, not
    textbook betweenness.
    """
    node_id: str
    distance_centrality: float = 0.0
    closeness_centrality: float = 0.0
    degree_centrality: float = 0.0


class Community(BaseModel):
    community_id: str
    nodes: list[str] = Field(default_factory=list)
    size: int = 0


class GraphAnalysis(BaseModel):
    central_nodes: list[CentralNode] = Field(default_factory=list)
    communities: list[Community] = Field(default_factory=list)
    hub_nodes: list[str] = Field(default_factory=list)


class YearRange(BaseModel):
    start: int | None = None
    end: int | None = None


class KnowledgeGraph(BaseModel):
    """Unified cross-cluster graph with statistics and analysis."""
    name: str = "Unified Research Knowledge Graph"
    description: str | None = None
    version: str = "1.0"
    nodes: list[KnowledgeGraphNode] = Field(default_factory=list)
    edges: list[KnowledgeGraphEdge] = Field(default_factory=list)
    statistics: GraphStatistics = Field(default_factory=GraphStatistics)
    analysis: GraphAnalysis = Field(default_factory=GraphAnalysis)
    source_clusters: list[str] = Field(default_factory=list)
    year_range: YearRange = Field(default_factory=YearRange)
    created_at: datetime = Field(default_factory=datetime.now)

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]
