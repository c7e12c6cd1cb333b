"""
K-means keyword clustering.

Groups keyword feature vectors into k thematic clusters and persists one
KeywordCluster per index (cluster_0 .. cluster_{k-1}).

Centroids are seeded by sampling k vectors uniformly with replacement from
an injectable numpy Generator, so two runs over identical input may produce
different (but equally valid) partitions unless a seed is pinned.
"""
import logging
from dataclasses import dataclass

import numpy as np

from ..core.exceptions import EmptyCorpusError, InputError
from ..core.schemas import ClusterProperties, KeywordCluster
from .vectorizer import FeatureVector, as_matrix, build_feature_vectors

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100
THEME_KEYWORDS = 3


@dataclass
class KMeansResult:
    """Raw output of one K-means run."""
    labels: np.ndarray      # (n,) cluster index per vector
    centroids: np.ndarray   # (k, d)
    iterations: int
    converged: bool


def kmeans(
    matrix: np.ndarray,
    k: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    rng: np.random.Generator | None = None,
) -> KMeansResult:
    """
    Lloyd's algorithm with random-sample seeding.

    Each vector goes to its nearest centroid by Euclidean distance (ties go
    to the lowest index). A centroid with no members keeps its previous
    position. Iteration stops once assignments repeat or max_iterations
    is reached.
    """
    if k < 1:
        raise InputError(f"Cluster count must be at least 1, got {k}")
    if len(matrix) == 0:
        raise EmptyCorpusError()

    rng = rng if rng is not None else np.random.default_rng()
    n = len(matrix)
    centroids = matrix[rng.integers(0, n, size=k)].astype(float)
    labels = np.zeros(n, dtype=int)
    converged = False
    iteration = 0

    while not converged and iteration < max_iterations:
        distances = np.linalg.norm(matrix[:, None, :] - centroids[None, :, :], axis=2)
        new_labels = distances.argmin(axis=1)

        converged = bool(np.array_equal(new_labels, labels))
        labels = new_labels

        for i in range(k):
            members = matrix[labels == i]
            if len(members):
                centroids[i] = members.mean(axis=0)
        iteration += 1

    logger.debug(f"K-means stopped after {iteration} iterations (converged={converged})")
    return KMeansResult(labels=labels, centroids=centroids, iterations=iteration, converged=converged)


def theme_label(keywords: list[str]) -> str:
    """Join the (up to) three longest keywords; equal lengths keep member order."""
    if not keywords:
        return "Unknown Theme"
    representative = sorted(keywords, key=len, reverse=True)[:THEME_KEYWORDS]
    return " / ".join(representative)


def cluster_confidence(members: np.ndarray, centroid: np.ndarray) -> float:
    """1 minus the mean member distance to the centroid, clipped to [0, 1]."""
    if len(members) <= 1:
        return 1.0
    mean_distance = float(np.linalg.norm(members - centroid, axis=1).mean())
    return min(max(0.0, 1.0 - mean_distance), 1.0)


def summarize_clusters(vectors: list[FeatureVector], result: KMeansResult) -> list[KeywordCluster]:
    """Turn a K-means result into KeywordCluster records, one per index."""
    matrix = as_matrix(vectors)
    clusters = []

    for i, centroid in enumerate(result.centroids):
        member_idx = np.flatnonzero(result.labels == i)
        keywords = [vectors[j].keyword for j in member_idx]
        paper_counts = [vectors[j].paper_count for j in member_idx]

        total_papers = sum(paper_counts)
        avg_papers = total_papers / len(paper_counts) if paper_counts else 0.0
        cluster_id = f"cluster_{i}"

        clusters.append(KeywordCluster(
            cluster_id=cluster_id,
            name=f"Cluster {cluster_id}",
            description=f"Theme-based cluster containing {len(keywords)} keywords",
            keywords=keywords,
            centroid=[float(x) for x in centroid],
            size=len(keywords),
            papers_count=total_papers,
            theme=theme_label(keywords),
            confidence=cluster_confidence(matrix[member_idx], centroid),
            properties=ClusterProperties(
                dominant_paper_count=max(paper_counts, default=0),
                avg_papers_per_keyword=round(avg_papers, 2),
            ),
        ))

    return clusters


class KeywordClusterer:
    """
    Clusters corpus keywords and persists the result.

    Reads keywords from a corpus source (anything with get_keywords(limit))
    and writes clusters to an AnalyticsStore.
    """

    def __init__(
        self,
        corpus,
        store,
        rng: np.random.Generator | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        """
        Args:
            corpus: Keyword source (e.g. CorpusIndex)
            store: Cluster sink (e.g. AnalyticsStore)
            rng: Random source for centroid seeding (None = unseeded)
            max_iterations: K-means iteration cap
        """
        self.corpus = corpus
        self.store = store
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_iterations = max_iterations

    def cluster_keywords(self, k: int = 10, keyword_limit: int | None = None) -> list[KeywordCluster]:
        """
        Cluster keywords thematically and upsert all k clusters.

        Clusters left over from an earlier run with a larger k are not
        removed; call clear_clusters() first for a clean slate.
        """
        logger.info(f"Starting keyword clustering (k={k}, limit={keyword_limit or 'all'})")

        vectors = build_feature_vectors(self.corpus.get_keywords(limit=keyword_limit))
        result = kmeans(as_matrix(vectors), k, max_iterations=self.max_iterations, rng=self.rng)
        clusters = summarize_clusters(vectors, result)

        for cluster in clusters:
            self.store.upsert_cluster(cluster)

        logger.info(
            f"Generated {len(clusters)} clusters from {len(vectors)} keywords "
            f"in {result.iterations} iterations"
        )
        return clusters

    def get_clusters(self) -> list[KeywordCluster]:
        return self.store.get_clusters()

    def get_cluster(self, cluster_id: str) -> KeywordCluster:
        return self.store.get_cluster(cluster_id)

    def get_cluster_keywords(self, cluster_id: str) -> list[str]:
        return self.store.get_cluster(cluster_id).keywords

    def clear_clusters(self) -> int:
        return self.store.clear_clusters()
