from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from docscrap.models.record import IndexRecord


@dataclass(slots=True)
class SQLiteIndexConfig:
    """Configuration for the SQLite index-record store."""

    db_path: Path
    enable_wal: bool = True


class SQLiteIndexStore:
    """Persists index records into SQLite + FTS5 for keyword retrieval."""

    def __init__(self, config: SQLiteIndexConfig) -> None:
        self.config = config
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.config.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.config.db_path)
            self._conn.row_factory = sqlite3.Row
            if self.config.enable_wal:
                self._conn.execute("PRAGMA journal_mode=WAL;")
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def initialize(self) -> None:
        """Create tables and FTS indices if they do not exist."""

        cursor = self.conn.cursor()
        cursor.executescript(
            """
            CREATE TABLE IF NOT EXISTS records (
                id TEXT PRIMARY KEY,
                url TEXT NOT NULL,
                source_url TEXT NOT NULL,
                heading TEXT NOT NULL,
                heading_level INTEGER NOT NULL,
                heading_path TEXT NOT NULL,
                content TEXT NOT NULL,
                token_estimate INTEGER NOT NULL,
                order_index INTEGER NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_records_url ON records (url);

            CREATE VIRTUAL TABLE IF NOT EXISTS records_fts USING fts5(
                id UNINDEXED,
                heading,
                heading_path,
                content,
                content='records',
                content_rowid='rowid'
            );

            CREATE TRIGGER IF NOT EXISTS records_ai AFTER INSERT ON records BEGIN
                INSERT INTO records_fts(rowid, id, heading, heading_path, content)
                VALUES (new.rowid, new.id, new.heading, new.heading_path, new.content);
            END;

            CREATE TRIGGER IF NOT EXISTS records_ad AFTER DELETE ON records BEGIN
                INSERT INTO records_fts(records_fts, rowid, id, heading, heading_path, content)
                VALUES ('delete', old.rowid, old.id, old.heading, old.heading_path, old.content);
            END;

            CREATE TRIGGER IF NOT EXISTS records_au AFTER UPDATE ON records BEGIN
                INSERT INTO records_fts(records_fts, rowid, id, heading, heading_path, content)
                VALUES ('delete', old.rowid, old.id, old.heading, old.heading_path, old.content);
                INSERT INTO records_fts(rowid, id, heading, heading_path, content)
                VALUES (new.rowid, new.id, new.heading, new.heading_path, new.content);
            END;
            """
        )
        self.conn.commit()

    def upsert_records(self, records: Iterable[IndexRecord]) -> int:
        cursor = self.conn.cursor()
        count = 0
        for order, record in enumerate(records):
            cursor.execute(
                """
                INSERT INTO records(
                    id, url, source_url, heading, heading_level,
                    heading_path, content, token_estimate, order_index
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    url=excluded.url,
                    source_url=excluded.source_url,
                    heading=excluded.heading,
                    heading_level=excluded.heading_level,
                    heading_path=excluded.heading_path,
                    content=excluded.content,
                    token_estimate=excluded.token_estimate,
                    order_index=excluded.order_index;
                """,
                (
                    record.id,
                    record.url,
                    record.source_url,
                    record.heading,
                    record.heading_level,
                    record.heading_path,
                    record.content,
                    record.token_estimate,
                    order,
                ),
            )
            count += 1
        self.conn.commit()
        return count

    def search(self, query: str, *, limit: int = 10) -> List[sqlite3.Row]:
        """Run a full-text search across headings and content."""

        safe = re.sub(r"[^\w\s]", " ", query)
        safe = re.sub(r"\s+", " ", safe).strip()
        if not safe:
            return []
        tokens = [t for t in safe.split(" ") if t]
        match_query = " OR ".join(tokens) if len(tokens) > 1 else tokens[0]

        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT r.*,
                   bm25(records_fts) AS score
            FROM records r
            JOIN records_fts ON r.rowid = records_fts.rowid
            WHERE records_fts MATCH ?
            ORDER BY score
            LIMIT ?;
            """,
            (match_query, limit),
        )
        return cursor.fetchall()

    def fetch_by_id(self, record_id: str) -> Optional[sqlite3.Row]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM records WHERE id = ?;", (record_id,))
        return cursor.fetchone()

    def iter_records(self, url: Optional[str] = None) -> List[sqlite3.Row]:
        cursor = self.conn.cursor()
        if url:
            cursor.execute(
                "SELECT * FROM records WHERE url = ? ORDER BY order_index;",
                (url,),
            )
        else:
            cursor.execute("SELECT * FROM records ORDER BY url, order_index;")
        return cursor.fetchall()

    def delete_url(self, url: str) -> None:
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM records WHERE url = ?", (url,))
        self.conn.commit()


__all__ = ["SQLiteIndexConfig", "SQLiteIndexStore"]
