"""
Tests for campus/search.py -- search records and SearchIndex.

Covers:
    - Record shape per kind
    - JSON dump of records
    - Full-text search with kind filter and hostile input
    - Stats, clear and rebuild
"""

import json

import pytest

from campus.search import SearchIndex, build_search_records, write_search_records


@pytest.fixture
def records(manager):
    return build_search_records(manager, "en")


@pytest.fixture
def index(records):
    idx = SearchIndex()
    idx.rebuild(records)
    yield idx
    idx.close()


def _ids(results):
    return sorted(r["id"] for r in results)


class TestSearchRecords:
    """Tests for build_search_records."""

    def test_one_record_per_entry(self, records):
        assert [r["objectID"] for r in records] == [
            "resource-digital-editions",
            "resource-intro-to-tei",
            "resource-data-cleaning",
            "event-summer-school",
            "curriculum-tei-basics",
        ]

    def test_resource_record(self, records):
        record = next(r for r in records if r["id"] == "intro-to-tei")
        assert record["kind"] == "resource"
        assert record["uuid"] == "5a1b6f9e-1d1e-4d1c-9a8f-000000000001"
        assert record["title"] == "Introduction to TEI"
        assert record["date"] == "2021-03-01"
        assert record["abstract"] == "Learn the basics of TEI."
        assert record["authors"] == [{"name": "Jane Doe", "id": "jane-doe"}]
        assert record["tags"] == [
            {"name": "TEI", "id": "tei"},
            {"name": "Digital editions", "id": "digital-editions"},
        ]

    def test_curriculum_has_no_people(self, records):
        """Curricula are indexed without authors or tags."""
        record = records[-1]
        assert record["kind"] == "curriculum"
        assert "authors" not in record
        assert "tags" not in record

    def test_write_records(self, records, tmp_path):
        path = tmp_path / "out" / "search.json"
        write_search_records(path, records)
        assert json.loads(path.read_text(encoding="utf-8")) == records


class TestSearchIndex:
    """Tests for the SQLite FTS5 index."""

    def test_search_all_words_must_match(self, index):
        assert _ids(index.search("digital editions")) == ["digital-editions", "intro-to-tei"]

    def test_search_author_names(self, index):
        assert _ids(index.search("Doe")) == ["data-cleaning", "intro-to-tei", "summer-school"]

    def test_search_ignores_accents(self, index):
        assert _ids(index.search("alvarez")) == ["data-cleaning"]

    def test_kind_filter(self, index):
        assert _ids(index.search("TEI", kind="event")) == ["summer-school"]
        assert _ids(index.search("TEI", kind="curriculum")) == ["tei-basics"]

    def test_results_are_full_records(self, index, records):
        [result] = index.search("cleaning")
        assert result == next(r for r in records if r["id"] == "data-cleaning")

    def test_empty_query(self, index):
        assert index.search("") == []
        assert index.search("   ") == []

    def test_operators_are_literal(self, index):
        """FTS5 syntax in user input neither raises nor acts as an operator."""
        assert index.search("NEAR(") == []
        assert _ids(index.search('"tei')) == _ids(index.search("tei"))

    def test_like_fallback(self, index, monkeypatch):
        """A MATCH expression SQLite rejects falls back to a LIKE search."""
        monkeypatch.setattr(SearchIndex, "_sanitise_fts_query",
                            staticmethod(lambda query: '"unterminated'))
        assert _ids(index.search("TEI")) == ["intro-to-tei", "summer-school", "tei-basics"]
        assert _ids(index.search("TEI", kind="event")) == ["summer-school"]

    def test_stats(self, index):
        assert index.get_stats() == {
            "total_records": 5,
            "by_kind": {"curriculum": 1, "event": 1, "resource": 3},
        }

    def test_clear(self, index):
        index.clear()
        assert index.get_stats()["total_records"] == 0
        assert index.search("tei") == []

    def test_rebuild_replaces(self, index, records):
        """Rebuilding drops entries that are no longer in the records."""
        assert index.rebuild(records[:1]) == 1
        assert _ids(index.search("editions")) == ["digital-editions"]

    def test_file_backed(self, tmp_path, records):
        db_path = tmp_path / "nested" / "search.db"
        with SearchIndex(db_path) as idx:
            idx.rebuild(records)
        assert db_path.exists()
        with SearchIndex(db_path) as idx:
            assert idx.get_stats()["total_records"] == 5
