"""
campus/search.py -- Search records and a local full-text index.

``build_search_records`` flattens resources, events and curricula into the
records a hosted search service expects (one object per entry, keyed by
``objectID``).  ``SearchIndex`` mirrors those records into SQLite with an
FTS5 table so the records can be queried locally; the records themselves
stay derived from the content files and the index is always rebuildable.

Usage:
    from campus.search import SearchIndex, build_search_records

    records = build_search_records(manager, "en")
    with SearchIndex() as index:
        index.rebuild(records)
        index.search("text encoding")
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from pathlib import Path

from campus.utils import get_full_name, safe_write_json

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def _people(people) -> list[dict]:
    return [{"name": get_full_name(person), "id": person.id} for person in people]


def _tags(tags) -> list[dict]:
    return [{"name": tag.name, "id": tag.id} for tag in tags]


def _record(kind: str, preview) -> dict:
    return {
        "kind": kind,
        "id": preview.id,
        "uuid": preview.uuid,
        "objectID": f"{kind}-{preview.id}",
        "title": preview.title,
        "date": preview.date,
        "abstract": preview.abstract,
    }


def build_search_records(manager, locale: str) -> list[dict]:
    """Return search records for all resources, events and curricula.

    Resources and events also carry ``authors`` and ``tags`` as
    ``{"name", "id"}`` pairs; curricula do not.
    """
    records: list[dict] = []

    for post in manager.posts.get_post_previews(locale):
        records.append({
            **_record("resource", post),
            "authors": _people(post.authors),
            "tags": _tags(post.tags),
        })

    for event in manager.events.get_event_previews(locale):
        records.append({
            **_record("event", event),
            "authors": _people(event.authors),
            "tags": _tags(event.tags),
        })

    for curriculum in manager.collections.get_collection_previews(locale):
        records.append(_record("curriculum", curriculum))

    logger.info("Built %d search records for locale %s", len(records), locale)
    return records


def write_search_records(path, records: list[dict]) -> None:
    """Dump *records* as a JSON array (atomic write)."""
    safe_write_json(path, records)
    logger.info("Wrote %d search records to %s", len(records), path)


# ---------------------------------------------------------------------------
# Local index
# ---------------------------------------------------------------------------

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS records (
    object_id TEXT PRIMARY KEY,
    kind TEXT NOT NULL,
    id TEXT NOT NULL,
    title TEXT NOT NULL,
    date TEXT,
    abstract TEXT,
    authors TEXT,
    tags TEXT,
    data JSON NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_records_kind ON records(kind);
"""

_FTS_CREATE_SQL = """
CREATE VIRTUAL TABLE IF NOT EXISTS record_search USING fts5(
    title,
    abstract,
    authors,
    tags,
    content='records',
    content_rowid='rowid',
    tokenize='porter unicode61'
);
"""


def _names(items) -> str:
    return ", ".join(item["name"] for item in items or [] if item.get("name"))


class SearchIndex:
    """SQLite FTS5 mirror of search records.

    Parameters
    ----------
    db_path : str or pathlib.Path
        Database file, created with its parent directory if needed.
        Defaults to an in-memory database.
    """

    def __init__(self, db_path=":memory:"):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            os.makedirs(str(Path(self.db_path).parent), exist_ok=True)

        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(_SCHEMA_SQL)
        self._conn.executescript(_FTS_CREATE_SQL)
        self._conn.commit()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def rebuild(self, records: list[dict]) -> int:
        """Replace the whole index with *records*; returns the record count."""
        self.clear()
        for record in records:
            self._insert(record)
        self._conn.commit()
        logger.info("Indexed %d search records", len(records))
        return len(records)

    def clear(self) -> None:
        """Remove every record."""
        self._conn.execute("DROP TABLE IF EXISTS record_search")
        self._conn.execute("DELETE FROM records")
        self._conn.executescript(_FTS_CREATE_SQL)
        self._conn.commit()

    def _insert(self, record: dict) -> None:
        authors = _names(record.get("authors"))
        tags = _names(record.get("tags"))
        cursor = self._conn.execute(
            """
            INSERT OR REPLACE INTO records
                (object_id, kind, id, title, date, abstract, authors, tags, data)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record["objectID"],
                record["kind"],
                record["id"],
                record.get("title") or "",
                record.get("date"),
                record.get("abstract") or "",
                authors,
                tags,
                json.dumps(record, ensure_ascii=False),
            ),
        )
        self._conn.execute(
            """
            INSERT INTO record_search(rowid, title, abstract, authors, tags)
            VALUES (?, ?, ?, ?, ?)
            """,
            (cursor.lastrowid, record.get("title") or "",
             record.get("abstract") or "", authors, tags),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, query: str, kind: str | None = None) -> list[dict]:
        """Full-text search over title, abstract, author and tag names.

        Every word must match.  Returns the stored records, best match
        first; *kind* restricts results to ``resource``, ``event`` or
        ``curriculum``.
        """
        if not query or not query.strip():
            return []

        safe_query = self._sanitise_fts_query(query.strip())
        sql = """
            SELECT r.data
            FROM record_search s
            JOIN records r ON r.rowid = s.rowid
            WHERE record_search MATCH ?
        """
        params: list = [safe_query]
        if kind is not None:
            sql += " AND r.kind = ?"
            params.append(kind)
        sql += " ORDER BY s.rank"

        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.OperationalError as exc:
            logger.debug("FTS query %r failed (%s); using LIKE search", safe_query, exc)
            return self._fallback_search(query.strip(), kind)
        return [json.loads(row["data"]) for row in rows]

    def get_stats(self) -> dict:
        rows = self._conn.execute(
            "SELECT kind, COUNT(*) AS cnt FROM records GROUP BY kind ORDER BY kind"
        ).fetchall()
        by_kind = {row["kind"]: row["cnt"] for row in rows}
        return {"total_records": sum(by_kind.values()), "by_kind": by_kind}

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _sanitise_fts_query(query: str) -> str:
        """Quote each word so FTS5 operators in user input are literal."""
        parts = [f'"{clean}"' for clean in (w.replace('"', "") for w in query.split()) if clean]
        return " ".join(parts) if parts else '""'

    def _fallback_search(self, query: str, kind: str | None) -> list[dict]:
        pattern = f"%{query}%"
        sql = """
            SELECT data FROM records
            WHERE (title LIKE ? OR abstract LIKE ? OR authors LIKE ? OR tags LIKE ?)
        """
        params: list = [pattern] * 4
        if kind is not None:
            sql += " AND kind = ?"
            params.append(kind)
        sql += " ORDER BY title"
        rows = self._conn.execute(sql, params).fetchall()
        return [json.loads(row["data"]) for row in rows]
