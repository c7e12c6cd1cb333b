"""
Unit tests for K-means keyword clustering.
"""
import pytest
from pathlib import Path
from unittest.mock import MagicMock

import numpy as np

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from confgraph.clustering.kmeans import (
    KMeansResult,
    KeywordClusterer,
    cluster_confidence,
    kmeans,
    summarize_clusters,
    theme_label,
)
from confgraph.clustering.vectorizer import build_feature_vectors
from confgraph.core.exceptions import EmptyCorpusError, InputError
from confgraph.core.schemas import KeywordRecord


class TestKMeans:
    """Tests for the raw kmeans() routine."""

    def test_single_cluster_converges_to_mean(self, rng):
        matrix = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])
        result = kmeans(matrix, 1, rng=rng)

        assert result.labels.tolist() == [0, 0, 0]
        assert result.centroids[0].tolist() == pytest.approx([1.0, 1.0, 1.0])
        assert result.converged is True

    def test_labels_in_range(self, rng):
        matrix = np.random.default_rng(0).random((20, 3))
        result = kmeans(matrix, 4, rng=rng)

        assert result.labels.shape == (20,)
        assert set(result.labels.tolist()) <= {0, 1, 2, 3}
        assert result.centroids.shape == (4, 3)

    def test_same_seed_same_partition(self):
        matrix = np.random.default_rng(0).random((30, 3))
        first = kmeans(matrix, 5, rng=np.random.default_rng(11))
        second = kmeans(matrix, 5, rng=np.random.default_rng(11))
        assert first.labels.tolist() == second.labels.tolist()

    def test_iteration_cap(self, rng):
        matrix = np.random.default_rng(0).random((30, 3))
        result = kmeans(matrix, 5, max_iterations=1, rng=rng)
        assert result.iterations == 1

    def test_invalid_k(self, rng):
        with pytest.raises(InputError):
            kmeans(np.zeros((3, 3)), 0, rng=rng)

    def test_empty_matrix(self, rng):
        with pytest.raises(EmptyCorpusError):
            kmeans(np.zeros((0, 3)), 2, rng=rng)


class TestThemeAndConfidence:
    """Tests for cluster labelling helpers."""

    def test_theme_uses_three_longest(self):
        theme = theme_label(["ai", "deep learning", "nlp", "computer vision"])
        assert theme == "computer vision / deep learning / nlp"

    def test_theme_does_not_reorder_members(self):
        members = ["ai", "deep learning", "nlp"]
        theme_label(members)
        assert members == ["ai", "deep learning", "nlp"]

    def test_empty_theme(self):
        assert theme_label([]) == "Unknown Theme"

    def test_confidence_single_member(self):
        assert cluster_confidence(np.array([[0.5, 0.5, 0.5]]), np.zeros(3)) == 1.0

    def test_confidence_clipped(self):
        members = np.array([[0.0, 0.0, 0.0], [10.0, 0.0, 0.0]])
        assert cluster_confidence(members, np.array([5.0, 0.0, 0.0])) == 0.0

    def test_confidence_from_mean_distance(self):
        members = np.array([[0.0, 0.0, 0.0], [0.2, 0.0, 0.0]])
        assert cluster_confidence(members, np.array([0.1, 0.0, 0.0])) == pytest.approx(0.9)


class TestSummarizeClusters:
    """Tests for turning labels into KeywordCluster records."""

    def test_records_per_index(self, scenario_a_keywords):
        vectors = build_feature_vectors(scenario_a_keywords)
        result = KMeansResult(
            labels=np.array([0, 0, 2]),
            centroids=np.zeros((3, 3)),
            iterations=1,
            converged=True,
        )
        clusters = summarize_clusters(vectors, result)

        assert [c.cluster_id for c in clusters] == ["cluster_0", "cluster_1", "cluster_2"]
        assert clusters[0].keywords == ["nlp", "graphs"]
        assert clusters[0].papers_count == 4
        assert clusters[0].properties.dominant_paper_count == 2
        assert clusters[0].properties.avg_papers_per_keyword == 2.0
        assert clusters[0].name == "Cluster cluster_0"
        assert clusters[0].description == "Theme-based cluster containing 2 keywords"

    def test_empty_cluster(self, scenario_a_keywords):
        vectors = build_feature_vectors(scenario_a_keywords)
        result = KMeansResult(
            labels=np.array([0, 0, 0]),
            centroids=np.zeros((2, 3)),
            iterations=1,
            converged=True,
        )
        empty = summarize_clusters(vectors, result)[1]

        assert empty.size == 0
        assert empty.keywords == []
        assert empty.theme == "Unknown Theme"
        assert empty.confidence == 1.0
        assert empty.properties.avg_papers_per_keyword == 0.0


class TestKeywordClusterer:
    """Tests for KeywordClusterer with mocked collaborators."""

    def test_partition_covers_every_keyword(self, scenario_a_keywords, rng):
        corpus = MagicMock()
        corpus.get_keywords.return_value = scenario_a_keywords
        store = MagicMock()

        clusters = KeywordClusterer(corpus, store, rng=rng).cluster_keywords(k=2)

        assert len(clusters) == 2
        members = [kw for c in clusters for kw in c.keywords]
        assert sorted(members) == ["graphs", "nlp", "security"]
        assert sum(c.size for c in clusters) == 3
        assert store.upsert_cluster.call_count == 2
        corpus.get_keywords.assert_called_once_with(limit=None)

    def test_more_clusters_than_keywords(self, rng):
        corpus = MagicMock()
        corpus.get_keywords.return_value = [KeywordRecord(keyword="solo", papers=["p1"])]

        clusters = KeywordClusterer(corpus, MagicMock(), rng=rng).cluster_keywords(k=3)

        assert len(clusters) == 3
        assert sum(c.size for c in clusters) == 1

    def test_cluster_keywords_lookup(self, rng, store):
        corpus = MagicMock()
        corpus.get_keywords.return_value = [KeywordRecord(keyword="solo", papers=["p1"])]
        clusterer = KeywordClusterer(corpus, store, rng=rng)

        clusterer.cluster_keywords(k=1)

        assert clusterer.get_cluster_keywords("cluster_0") == ["solo"]
        assert clusterer.clear_clusters() == 1
        assert clusterer.get_clusters() == []

    def test_empty_corpus(self, rng):
        corpus = MagicMock()
        corpus.get_keywords.return_value = []
        store = MagicMock()

        with pytest.raises(EmptyCorpusError):
            KeywordClusterer(corpus, store, rng=rng).cluster_keywords(k=2)
        store.upsert_cluster.assert_not_called()
