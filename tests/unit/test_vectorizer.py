"""
Unit tests for keyword feature vectors.
"""
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from confgraph.clustering.vectorizer import as_matrix, build_feature_vectors, keyword_features
from confgraph.core.exceptions import EmptyCorpusError, InputError
from confgraph.core.schemas import KeywordRecord


class TestKeywordFeatures:
    """Tests for the three-feature keyword encoding."""

    def test_paper_frequency_is_capped(self):
        assert keyword_features("nlp", 50)[0] == pytest.approx(0.5)
        assert keyword_features("nlp", 250)[0] == 1.0

    def test_length_feature(self):
        assert keyword_features("a" * 25, 0)[1] == pytest.approx(0.5)

    def test_char_sum_feature(self):
        # "nlp" = 110 + 108 + 112 = 330
        assert keyword_features("nlp", 0)[2] == pytest.approx(0.33)

    def test_char_sum_wraps_modulo(self):
        # 11 * "d" = 11 * 100 = 1100 -> 100
        assert keyword_features("d" * 11, 0)[2] == pytest.approx(0.1)


class TestBuildFeatureVectors:
    """Tests for build_feature_vectors()."""

    def test_order_and_paper_count(self, scenario_a_keywords):
        vectors = build_feature_vectors(scenario_a_keywords)

        assert [v.keyword for v in vectors] == ["nlp", "graphs", "security"]
        assert [v.paper_count for v in vectors] == [2, 2, 1]
        assert vectors[0].vector[0] == pytest.approx(0.02)

    def test_limit_takes_prefix(self, scenario_a_keywords):
        vectors = build_feature_vectors(scenario_a_keywords, limit=2)
        assert [v.keyword for v in vectors] == ["nlp", "graphs"]

    def test_empty_corpus_raises(self):
        with pytest.raises(EmptyCorpusError):
            build_feature_vectors([])

    def test_empty_corpus_is_input_error(self):
        with pytest.raises(InputError, match="No keywords found"):
            build_feature_vectors(iter([]))

    def test_matrix_shape(self):
        records = [KeywordRecord(keyword=f"kw{i}", papers=[]) for i in range(4)]
        matrix = as_matrix(build_feature_vectors(records))
        assert matrix.shape == (4, 3)
