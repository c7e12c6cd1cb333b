"""
Analytics store: write-side SQLite store for pipeline artifacts.

Holds the three artifacts the pipeline produces:
- keyword_clusters: upserted in place by cluster_id on every clustering run
- keyword_connections: unique on (source_keyword, target_keyword)
- knowledge_graphs: one JSON document per build, newest is current

Clears and rebuilds are separate statements, not one transaction. A reader
between a clear and the following build sees an empty artifact.
"""
import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from ..core.exceptions import NotFoundError, PersistenceError
from ..core.schemas import (
    ClusterProperties,
    ConnectionStrength,
    KeywordCluster,
    KeywordConnection,
    KnowledgeGraph,
)

logger = logging.getLogger(__name__)


class AnalyticsStore:
    """Persist clusters, keyword connections and knowledge graphs."""

    def __init__(self, db_path: str | Path = "data/confgraph.db"):
        """
        Initialize analytics store.

        Args:
            db_path: Path to SQLite database (may be shared with CorpusIndex)
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS keyword_clusters (
                    cluster_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    description TEXT,
                    keywords TEXT,  -- JSON array
                    centroid TEXT,  -- JSON array
                    size INTEGER DEFAULT 0,
                    papers_count INTEGER DEFAULT 0,
                    theme TEXT,
                    confidence REAL DEFAULT 0,
                    properties TEXT,  -- JSON dict
                    updated_at TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS keyword_connections (
                    source_keyword TEXT NOT NULL,
                    target_keyword TEXT NOT NULL,
                    co_occurrence_count INTEGER NOT NULL DEFAULT 1,
                    weight REAL DEFAULT 0,
                    papers TEXT,  -- JSON array
                    cluster_id TEXT,
                    strength TEXT CHECK(strength IN ('weak', 'medium', 'strong')),
                    updated_at TEXT,
                    UNIQUE (source_keyword, target_keyword)
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_connections_cluster ON keyword_connections(cluster_id)"
            )
            conn.execute("""
                CREATE TABLE IF NOT EXISTS knowledge_graphs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    version TEXT,
                    document TEXT NOT NULL,  -- full KnowledgeGraph JSON
                    created_at TEXT NOT NULL
                )
            """)
            conn.commit()

    def _execute(self, operation: str, sql: str, params: tuple = ()) -> int:
        """Run one write statement, translating sqlite errors."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute(sql, params)
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(operation, e) from e

    # --------------------------------------------------------
    # Clusters
    # --------------------------------------------------------

    def upsert_cluster(self, cluster: KeywordCluster):
        """Insert a cluster, or update it in place keeping its storage position."""
        self._execute(f"upsert cluster {cluster.cluster_id}", """
            INSERT INTO keyword_clusters
            (cluster_id, name, description, keywords, centroid, size, papers_count,
             theme, confidence, properties, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(cluster_id) DO UPDATE SET
                name = excluded.name,
                description = excluded.description,
                keywords = excluded.keywords,
                centroid = excluded.centroid,
                size = excluded.size,
                papers_count = excluded.papers_count,
                theme = excluded.theme,
                confidence = excluded.confidence,
                properties = excluded.properties,
                updated_at = excluded.updated_at
        """, (
            cluster.cluster_id,
            cluster.name,
            cluster.description,
            json.dumps(cluster.keywords),
            json.dumps(cluster.centroid),
            cluster.size,
            cluster.papers_count,
            cluster.theme,
            cluster.confidence,
            cluster.properties.model_dump_json(),
            datetime.now().isoformat(),
        ))
        logger.debug(f"Upserted {cluster.cluster_id} ({cluster.size} keywords)")

    def get_clusters(self, by_size: bool = True) -> list[KeywordCluster]:
        """
        Get all clusters.

        Args:
            by_size: Largest first (ties in storage order); False for
                plain storage order
        """
        order = "size DESC, rowid ASC" if by_size else "rowid ASC"
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                f"SELECT * FROM keyword_clusters ORDER BY {order}"
            ).fetchall()
        return [self._row_to_cluster(row) for row in rows]

    def find_cluster(self, cluster_id: str) -> KeywordCluster | None:
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT * FROM keyword_clusters WHERE cluster_id = ?", (cluster_id,)
            ).fetchone()
        return self._row_to_cluster(row) if row else None

    def get_cluster(self, cluster_id: str) -> KeywordCluster:
        """Get a cluster by id or raise NotFoundError."""
        cluster = self.find_cluster(cluster_id)
        if cluster is None:
            raise NotFoundError("Cluster", cluster_id)
        return cluster

    def count_clusters(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM keyword_clusters").fetchone()[0]

    def clear_clusters(self) -> int:
        deleted = self._execute("clear clusters", "DELETE FROM keyword_clusters")
        logger.warning(f"Cleared {deleted} clusters")
        return deleted

    @staticmethod
    def _row_to_cluster(row: sqlite3.Row) -> KeywordCluster:
        return KeywordCluster(
            cluster_id=row["cluster_id"],
            name=row["name"],
            description=row["description"],
            keywords=json.loads(row["keywords"] or "[]"),
            centroid=json.loads(row["centroid"] or "[]"),
            size=row["size"] or 0,
            papers_count=row["papers_count"] or 0,
            theme=row["theme"],
            confidence=row["confidence"] or 0.0,
            properties=ClusterProperties.model_validate_json(row["properties"] or "{}"),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # --------------------------------------------------------
    # Connections
    # --------------------------------------------------------

    def upsert_connection(self, connection: KeywordConnection):
        """Insert or update a connection keyed by (source_keyword, target_keyword)."""
        self._execute(
            f"upsert connection {connection.source_keyword} -- {connection.target_keyword}",
            """
            INSERT INTO keyword_connections
            (source_keyword, target_keyword, co_occurrence_count, weight, papers,
             cluster_id, strength, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(source_keyword, target_keyword) DO UPDATE SET
                co_occurrence_count = excluded.co_occurrence_count,
                weight = excluded.weight,
                papers = excluded.papers,
                cluster_id = excluded.cluster_id,
                strength = excluded.strength,
                updated_at = excluded.updated_at
            """,
            (
                connection.source_keyword,
                connection.target_keyword,
                connection.co_occurrence_count,
                connection.weight,
                json.dumps(connection.papers),
                connection.cluster_id,
                connection.strength.value,
                datetime.now().isoformat(),
            ),
        )

    def get_connections(
        self,
        cluster_id: str | None = None,
        limit: int | None = None,
    ) -> list[KeywordConnection]:
        """
        Get connections, most frequent first.

        Args:
            cluster_id: Restrict to one cluster
            limit: Maximum rows (None = all)
        """
        sql = "SELECT * FROM keyword_connections"
        params: list = []
        if cluster_id is not None:
            sql += " WHERE cluster_id = ?"
            params.append(cluster_id)
        sql += " ORDER BY co_occurrence_count DESC, rowid ASC"
        if limit:
            sql += " LIMIT ?"
            params.append(limit)

        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(sql, params).fetchall()

        return [
            KeywordConnection(
                source_keyword=row["source_keyword"],
                target_keyword=row["target_keyword"],
                co_occurrence_count=row["co_occurrence_count"],
                weight=row["weight"] or 0.0,
                papers=json.loads(row["papers"] or "[]"),
                cluster_id=row["cluster_id"],
                strength=ConnectionStrength(row["strength"] or "weak"),
                updated_at=datetime.fromisoformat(row["updated_at"]),
            )
            for row in rows
        ]

    def count_connections(self, cluster_id: str | None = None) -> int:
        with sqlite3.connect(self.db_path) as conn:
            if cluster_id is None:
                row = conn.execute("SELECT COUNT(*) FROM keyword_connections").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM keyword_connections WHERE cluster_id = ?",
                    (cluster_id,),
                ).fetchone()
            return row[0]

    def clear_connections(self) -> int:
        deleted = self._execute("clear connections", "DELETE FROM keyword_connections")
        logger.warning(f"Cleared {deleted} keyword connections")
        return deleted

    # --------------------------------------------------------
    # Knowledge graphs
    # --------------------------------------------------------

    def save_knowledge_graph(self, graph: KnowledgeGraph) -> int:
        """Store a knowledge graph document and return its row id."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("""
                    INSERT INTO knowledge_graphs (name, version, document, created_at)
                    VALUES (?, ?, ?, ?)
                """, (
                    graph.name,
                    graph.version,
                    graph.model_dump_json(),
                    graph.created_at.isoformat(),
                ))
                conn.commit()
                return cursor.lastrowid
        except sqlite3.Error as e:
            raise PersistenceError("save knowledge graph", e) from e

    def get_knowledge_graph(self) -> KnowledgeGraph | None:
        """Get the most recently built knowledge graph."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("""
                SELECT document FROM knowledge_graphs
                ORDER BY created_at DESC, id DESC
                LIMIT 1
            """).fetchone()
        if not row:
            return None
        return KnowledgeGraph.model_validate_json(row[0])

    def count_knowledge_graphs(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM knowledge_graphs").fetchone()[0]

    def clear_knowledge_graphs(self) -> int:
        deleted = self._execute("clear knowledge graphs", "DELETE FROM knowledge_graphs")
        logger.warning(f"Cleared {deleted} knowledge graphs")
        return deleted

    # --------------------------------------------------------
    # Status
    # --------------------------------------------------------

    def get_stats(self) -> dict:
        """Artifact counts and whether each stage has produced output."""
        clusters = self.count_clusters()
        connections = self.count_connections()
        graphs = self.count_knowledge_graphs()
        return {
            "clusters_generated": clusters > 0,
            "clusters_count": clusters,
            "connectivity_graphs_generated": connections > 0,
            "connections_count": connections,
            "knowledge_graph_generated": graphs > 0,
            "knowledge_graph_count": graphs,
        }
