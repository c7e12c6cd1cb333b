"""
Keyword co-occurrence index.

Self-join of each paper's keyword list: every unordered pair of distinct
keywords in one paper counts once for that paper. Pairs are keyed by the
lexicographically sorted tuple so (A, B) and (B, A) land on the same entry.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from ..core.schemas import PaperRecord

logger = logging.getLogger(__name__)


@dataclass
class CoOccurrence:
    """Count and supporting papers for one keyword pair."""
    count: int = 0
    papers: list[str] = field(default_factory=list)


def canonical_pair(first: str, second: str) -> tuple[str, str]:
    return (first, second) if first <= second else (second, first)


def find_cooccurrences(papers: Iterable[PaperRecord]) -> dict[tuple[str, str], CoOccurrence]:
    """
    Count keyword pairs across all papers.

    A keyword listed twice in the same paper is only paired once, and a
    paper id is recorded at most once per pair.
    """
    pairs: dict[tuple[str, str], CoOccurrence] = defaultdict(CoOccurrence)
    paper_count = 0

    for paper in papers:
        paper_count += 1
        keywords = list(dict.fromkeys(paper.keywords))
        for i, k1 in enumerate(keywords):
            for k2 in keywords[i + 1:]:
                entry = pairs[canonical_pair(k1, k2)]
                entry.count += 1
                if paper.id not in entry.papers:
                    entry.papers.append(paper.id)

    logger.info(f"Found {len(pairs)} keyword pairs across {paper_count} papers")
    return dict(pairs)


def max_cooccurrence(pairs: dict[tuple[str, str], CoOccurrence]) -> int:
    """Largest pair count in the corpus (0 for an empty index)."""
    return max((entry.count for entry in pairs.values()), default=0)
