"""
Keyword feature vectors for clustering.

Each keyword maps to three features in fixed order:
    f0 = min(paper_count / 100, 1)            normalized paper frequency
    f1 = len(keyword) / 50                     normalized keyword length
    f2 = (sum of character codes % 1000) / 1000
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from ..core.exceptions import EmptyCorpusError
from ..core.schemas import KeywordRecord

logger = logging.getLogger(__name__)

FEATURE_DIMENSIONS = 3
PAPER_COUNT_CAP = 100
KEYWORD_LENGTH_SCALE = 50
CHAR_SUM_MODULUS = 1000


@dataclass
class FeatureVector:
    """A keyword and its clustering features."""
    keyword: str
    vector: tuple[float, float, float]
    paper_count: int = 0
    papers: list[str] = field(default_factory=list)


def keyword_features(keyword: str, paper_count: int) -> tuple[float, float, float]:
    char_sum = sum(ord(ch) for ch in keyword)
    return (
        min(paper_count / PAPER_COUNT_CAP, 1.0),
        len(keyword) / KEYWORD_LENGTH_SCALE,
        (char_sum % CHAR_SUM_MODULUS) / CHAR_SUM_MODULUS,
    )


def build_feature_vectors(
    keywords: Iterable[KeywordRecord],
    limit: int | None = None,
) -> list[FeatureVector]:
    """
    Vectorize keywords in input order.

    Args:
        keywords: Keyword records from the corpus
        limit: Optional cap on how many keywords are processed

    Raises:
        EmptyCorpusError: if no keywords are supplied
    """
    vectors = []
    for record in keywords:
        if limit is not None and len(vectors) >= limit:
            break
        vectors.append(FeatureVector(
            keyword=record.keyword,
            vector=keyword_features(record.keyword, record.paper_count),
            paper_count=record.paper_count,
            papers=list(record.papers),
        ))

    if not vectors:
        raise EmptyCorpusError()

    logger.info(f"Generated vectors for {len(vectors)} keywords")
    return vectors


def as_matrix(vectors: list[FeatureVector]) -> np.ndarray:
    """Stack feature vectors into an (n, 3) float array."""
    return np.array([v.vector for v in vectors], dtype=float).reshape(-1, FEATURE_DIMENSIONS)
