"""
Tests for campus/preview.py -- CMS preview rendering.

Entries and relation metadata are built in memory; nothing here reads the
content tree.
"""

import datetime

from campus.preview import (
    build_collection_preview,
    build_event_preview,
    build_post_preview,
    resolve_relation,
    resolve_relations,
)

PEOPLE = {
    "jane-doe": {"firstName": "Jane", "lastName": "Doe"},
    "john-smith": {"firstName": "John", "lastName": "Smith"},
}

FIELDS_METADATA = {
    "authors": {"people": PEOPLE},
    "editors": {"people": PEOPLE},
    "tags": {"tags": {"tei": {"name": "TEI"}}},
    "type": {"content-types": {
        "training-module": {"name": "Training module"},
        "event": {"name": "Event"},
    }},
    "licence": {"licences": {"ccby-4.0": {"name": "CC BY 4.0"}}},
    "partners": {"organisations": {"ngo": {"name": "Example Organisation"}}},
    "sessions": {"speakers": {"people": PEOPLE}},
}


def _post_entry(**data):
    base = {
        "title": "Draft",
        "date": datetime.date(2021, 5, 4),
        "authors": ["jane-doe", "unknown-person"],
        "tags": ["tei"],
        "type": "training-module",
        "licence": "ccby-4.0",
        "body": "## First\n\n![Figure](images/figure.png)",
    }
    base.update(data)
    return {"slug": "draft", "data": base}


class TestResolveRelation:
    def test_found(self):
        assert resolve_relation(FIELDS_METADATA, ["tags", "tags"], "tei") == {
            "id": "tei", "name": "TEI",
        }

    def test_missing_path_or_id(self):
        assert resolve_relation(FIELDS_METADATA, ["tags", "tags"], "nope") is None
        assert resolve_relation(FIELDS_METADATA, ["nope", "tags"], "tei") is None
        assert resolve_relation({}, ["tags", "tags"], "tei") is None

    def test_non_list_ids(self):
        assert resolve_relations(FIELDS_METADATA, ["tags", "tags"], None) == []


class TestPostPreview:
    """Tests for build_post_preview."""

    def test_resolves_relations(self):
        post = build_post_preview(_post_entry(), FIELDS_METADATA)
        meta = post.data.metadata
        assert post.id == "draft"
        assert [a.full_name for a in meta.authors] == ["Jane Doe"]
        assert meta.tags[0].name == "TEI"
        assert meta.type.name == "Training module"
        assert meta.licence.id == "ccby-4.0"

    def test_dates_become_strings(self):
        post = build_post_preview(_post_entry(), FIELDS_METADATA)
        assert post.data.metadata.date == "2021-05-04"

    def test_compiles_body_with_toc(self):
        post = build_post_preview(_post_entry(), FIELDS_METADATA)
        assert post.data.toc[0].value == "First"
        assert 'id="first"' in post.html

    def test_asset_resolver(self):
        """Images are rewritten through the CMS resolver."""
        post = build_post_preview(_post_entry(), FIELDS_METADATA,
                                  asset_resolver=lambda src: f"blob:{src}")
        assert 'src="blob:images/figure.png"' in post.html

    def test_invalid_mdx_renders_none(self):
        assert build_post_preview(_post_entry(body="<Carousel />"), FIELDS_METADATA) is None

    def test_bad_video_start_time_renders_none(self):
        """Component attribute errors render as a failed preview, not an exception."""
        entry = _post_entry(body='<Video id="abc" startTime="soon" />')
        assert build_post_preview(entry, FIELDS_METADATA) is None

    def test_missing_type_renders_none(self):
        """Without a resolvable content type the preview cannot be built."""
        assert build_post_preview(_post_entry(type="unknown"), FIELDS_METADATA) is None


class TestEventPreview:
    """Tests for build_event_preview."""

    def _entry(self, **data):
        base = {
            "title": "Summer school",
            "date": "2021-07-01",
            "authors": ["jane-doe"],
            "partners": ["ngo"],
            "about": "About *us*.",
            "sessions": [
                {"title": "Opening", "speakers": ["john-smith"], "body": "**Hello**"},
            ],
            "body": "Event body.",
        }
        base.update(data)
        return {"slug": "summer", "data": base}

    def test_defaults_and_partners(self):
        event = build_event_preview(self._entry(), FIELDS_METADATA)
        meta = event.data.metadata
        assert meta.type.id == "event"
        assert meta.licence.id == "ccby-4.0"
        assert meta.partners[0].name == "Example Organisation"

    def test_sessions(self):
        meta = build_event_preview(self._entry(), FIELDS_METADATA).data.metadata
        session = meta.sessions[0]
        assert [s.full_name for s in session.speakers] == ["John Smith"]
        assert "<strong>Hello</strong>" in session.body.html

    def test_nested_fields_compiled(self):
        meta = build_event_preview(self._entry(), FIELDS_METADATA).data.metadata
        assert "<em>us</em>" in meta.about.html
        assert meta.prep is None

    def test_prep_when_present(self):
        meta = build_event_preview(self._entry(prep="Bring a laptop."),
                                   FIELDS_METADATA).data.metadata
        assert "Bring a laptop." in meta.prep.html

    def test_body(self):
        assert "Event body." in build_event_preview(self._entry(), FIELDS_METADATA).html

    def test_invalid_session_body(self):
        entry = self._entry(sessions=[{"title": "Broken", "body": "<SideNote>\nopen"}])
        assert build_event_preview(entry, FIELDS_METADATA) is None


class TestCollectionPreview:
    """Tests for build_collection_preview."""

    def _metadata(self):
        resource = {
            "title": "Intro", "date": "2021-01-01",
            "type": {"id": "training-module", "name": "Training module"},
            "licence": {"id": "ccby-4.0", "name": "CC BY 4.0"},
        }
        return {
            **FIELDS_METADATA,
            "resources": {"post": {"resources": {
                "intro": resource,
                "incomplete": {"title": "No type"},
            }}},
        }

    def test_resources_in_order(self):
        entry = {"slug": "course", "data": {
            "title": "Course", "date": "2021-02-02", "editors": ["john-smith"],
            "resources": ["incomplete", "missing", "intro"],
            "body": "## Part one",
        }}
        collection = build_collection_preview(entry, self._metadata())
        meta = collection.data.metadata
        assert [r.id for r in meta.resources] == ["intro"]
        assert meta.editors[0].id == "john-smith"
        assert meta.licence is None
        assert collection.data.toc[0].value == "Part one"

    def test_missing_title_renders_none(self):
        entry = {"slug": "course", "data": {"date": "2021-02-02", "body": ""}}
        assert build_collection_preview(entry, self._metadata()) is None
