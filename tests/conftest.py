"""
Pytest configuration and fixtures.
"""
import pytest
import sys
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from confgraph.core.schemas import KeywordRecord, PaperRecord
from confgraph.storage import AnalyticsStore, CorpusIndex


@pytest.fixture
def db_path(tmp_path):
    """Throwaway SQLite database shared by corpus and analytics store."""
    return tmp_path / "confgraph.db"


@pytest.fixture
def corpus(db_path):
    return CorpusIndex(db_path)


@pytest.fixture
def store(db_path):
    return AnalyticsStore(db_path)


@pytest.fixture
def rng():
    """Pinned random source so partitions are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def scenario_a_keywords():
    return [
        KeywordRecord(keyword="nlp", papers=["p1", "p2"], count=2),
        KeywordRecord(keyword="graphs", papers=["p2", "p3"], count=2),
        KeywordRecord(keyword="security", papers=["p4"], count=1),
    ]


@pytest.fixture
def scenario_a_papers():
    return [
        PaperRecord(id="p1", keywords=["nlp"], year=2021),
        PaperRecord(id="p2", keywords=["nlp", "graphs"], year=2022),
        PaperRecord(id="p3", keywords=["graphs"], year=2022),
        PaperRecord(id="p4", keywords=["security"], year=2023),
    ]


@pytest.fixture
def seeded_corpus(corpus, scenario_a_keywords, scenario_a_papers):
    """Corpus index populated with the three-keyword sample."""
    corpus.add_keywords(scenario_a_keywords)
    corpus.add_papers(scenario_a_papers)
    return corpus
