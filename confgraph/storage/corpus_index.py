"""
Corpus index: read-side SQLite store for keywords and papers.

The analytics pipeline only reads from here. Population happens upstream
(import jobs, CRUD); add_* methods exist for those collaborators and tests.
"""
import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from ..core.exceptions import PersistenceError
from ..core.schemas import KeywordRecord, PaperRecord

logger = logging.getLogger(__name__)


class CorpusIndex:
    """
    SQLite-backed keyword/paper corpus.

    Keywords are returned in insertion order so that a keyword limit
    always selects the same prefix of the corpus.
    """

    def __init__(self, db_path: str | Path = "data/confgraph.db"):
        """
        Initialize corpus index.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_db()
        logger.info(f"CorpusIndex initialized at {self.db_path}")

    def _init_db(self):
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS keywords (
                    keyword TEXT PRIMARY KEY,
                    papers TEXT,  -- JSON array of paper ids
                    count INTEGER DEFAULT 0,
                    added_at TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS papers (
                    paper_id TEXT PRIMARY KEY,
                    keywords TEXT,  -- JSON array, order preserved
                    title TEXT,
                    year INTEGER,
                    conference TEXT
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_papers_year ON papers(year)")
            conn.commit()

    # --------------------------------------------------------
    # Population
    # --------------------------------------------------------

    def add_keyword(self, record: KeywordRecord):
        """Add or replace a keyword."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT INTO keywords (keyword, papers, count, added_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(keyword) DO UPDATE SET
                        papers = excluded.papers,
                        count = excluded.count
                """, (
                    record.keyword,
                    json.dumps(record.papers),
                    record.count or len(record.papers),
                    datetime.now().isoformat(),
                ))
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"add keyword {record.keyword!r}", e) from e

    def add_keywords(self, records: list[KeywordRecord]):
        for record in records:
            self.add_keyword(record)
        logger.info(f"Indexed {len(records)} keywords")

    def add_paper(self, paper: PaperRecord):
        """Add or replace a paper."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO papers (paper_id, keywords, title, year, conference)
                    VALUES (?, ?, ?, ?, ?)
                """, (
                    paper.id,
                    json.dumps(paper.keywords),
                    paper.title,
                    paper.year,
                    paper.conference,
                ))
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"add paper {paper.id!r}", e) from e

    def add_papers(self, papers: list[PaperRecord]):
        for paper in papers:
            self.add_paper(paper)
        logger.info(f"Indexed {len(papers)} papers")

    # --------------------------------------------------------
    # Read contracts
    # --------------------------------------------------------

    def get_keywords(self, limit: int | None = None) -> list[KeywordRecord]:
        """Get keywords in insertion order, optionally capped."""
        sql = "SELECT keyword, papers, count FROM keywords ORDER BY rowid"
        params: tuple = ()
        if limit:
            sql += " LIMIT ?"
            params = (limit,)

        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(sql, params).fetchall()

        return [
            KeywordRecord(keyword=row[0], papers=json.loads(row[1] or "[]"), count=row[2] or 0)
            for row in rows
        ]

    def get_papers(self) -> list[PaperRecord]:
        """Get every paper with its ordered keyword list."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                "SELECT * FROM papers ORDER BY rowid"
            ).fetchall()

        return [
            PaperRecord(
                id=row["paper_id"],
                keywords=json.loads(row["keywords"] or "[]"),
                title=row["title"],
                year=row["year"],
                conference=row["conference"],
            )
            for row in rows
        ]

    # --------------------------------------------------------
    # Utilities
    # --------------------------------------------------------

    def count_keywords(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM keywords").fetchone()[0]

    def count_papers(self) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute("SELECT COUNT(*) FROM papers").fetchone()[0]

    def get_year_range(self) -> tuple[int | None, int | None]:
        """Get min/max publication years (None when no paper has a year)."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("""
                SELECT MIN(year), MAX(year) FROM papers WHERE year IS NOT NULL
            """).fetchone()
            return (row[0], row[1])

    def clear(self):
        """Remove all keywords and papers."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM keywords")
            conn.execute("DELETE FROM papers")
            conn.commit()
        logger.warning("Corpus index cleared")
