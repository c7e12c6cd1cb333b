"""
Storage module - SQLite persistence for the corpus and analytics artifacts.

Provides:
- CorpusIndex: read-side keywords and papers
- AnalyticsStore: clusters, keyword connections, knowledge graphs
"""
from .corpus_index import CorpusIndex
from .analytics_store import AnalyticsStore

__all__ = [
    "CorpusIndex",
    "AnalyticsStore",
]
