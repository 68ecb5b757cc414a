"""
campus/validation.py -- Frontmatter schemas and content health checks.

The JSON Schemas below describe what editors write into the frontmatter of
resources, events and curricula.  Relation fields carry an
``x-cross-reference`` annotation naming the collection they point into;
:mod:`campus.graph` reads those annotations to draw edges, and
:func:`check_content` reports every edge whose target file is missing.

Usage:
    from campus.validation import check_content, validate_frontmatter

    problems = validate_frontmatter(matter, "resources")
    for issue in check_content(manager, "en"):
        print(issue)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import jsonschema

from campus.errors import CampusError

logger = logging.getLogger(__name__)

LANGUAGES = ["en", "de"]

DOMAINS = ["Social Sciences and Humanities"]

TARGET_GROUPS = [
    "Data managers",
    "Domain researchers",
    "Data service engineers",
    "Data scientists/analysts",
]


def _ref_list(collection: str, *, nullable: bool = False) -> dict:
    return {
        "type": ["array", "null"] if nullable else "array",
        "items": {"type": "string", "minLength": 1, "x-cross-reference": collection},
    }


def _ref(collection: str, **extra) -> dict:
    return {"type": "string", "minLength": 1, "x-cross-reference": collection, **extra}


_COMMON_PROPERTIES = {
    "uuid": {"type": "string"},
    "title": {"type": "string", "minLength": 1},
    "shortTitle": {"type": ["string", "null"]},
    "lang": {"enum": LANGUAGES},
    "date": {"type": "string", "minLength": 1},
    "featuredImage": {"type": ["string", "null"]},
    "abstract": {"type": ["string", "null"]},
}

RESOURCE_SCHEMA = {
    "$id": "campus:resource",
    "type": "object",
    "required": [
        "title", "lang", "date", "version", "authors", "tags", "categories",
        "abstract", "type", "licence",
    ],
    "properties": {
        **_COMMON_PROPERTIES,
        "version": {"type": ["string", "number", "null"]},
        "authors": {**_ref_list("people"), "minItems": 1},
        "editors": _ref_list("people", nullable=True),
        "contributors": _ref_list("people", nullable=True),
        "tags": _ref_list("tags", nullable=True),
        "categories": _ref_list("categories", nullable=True),
        "domain": {"enum": [*DOMAINS, None]},
        "targetGroup": {"enum": [*TARGET_GROUPS, None]},
        "type": _ref("content-types"),
        "licence": _ref("licences"),
        "remote": {
            "type": ["object", "null"],
            "properties": {
                "publisher": {"type": ["string", "null"]},
                "date": {"type": ["string", "null"]},
                "url": {"type": ["string", "null"]},
            },
        },
        "toc": {"type": "boolean"},
    },
}

EVENT_SCHEMA = {
    "$id": "campus:event",
    "type": "object",
    "required": ["title", "date", "authors"],
    "properties": {
        **_COMMON_PROPERTIES,
        "eventType": {"type": ["string", "null"]},
        "logo": {"type": ["string", "null"]},
        "authors": _ref_list("people", nullable=True),
        "tags": _ref_list("tags", nullable=True),
        "categories": _ref_list("categories", nullable=True),
        "partners": _ref_list("organisations", nullable=True),
        "type": _ref("content-types", default="event"),
        "licence": _ref("licences", default="ccby-4.0"),
        "about": {"type": ["string", "null"]},
        "prep": {"type": ["string", "null"]},
        "synthesis": {"type": ["string", "null"]},
        "social": {"type": ["object", "null"]},
        "sessions": {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "required": ["title"],
                "properties": {
                    "title": {"type": "string", "minLength": 1},
                    "speakers": _ref_list("people", nullable=True),
                    "body": {"type": ["string", "null"]},
                    "synthesis": {"type": ["string", "null"]},
                },
            },
        },
    },
}

COLLECTION_SCHEMA = {
    "$id": "campus:curriculum",
    "type": "object",
    "required": ["title", "lang", "date", "editors", "resources"],
    "properties": {
        **_COMMON_PROPERTIES,
        "version": {"type": ["string", "number", "null"]},
        "editors": {**_ref_list("people"), "minItems": 1},
        "tags": _ref_list("tags", nullable=True),
        "licence": {**_ref("licences"), "type": ["string", "null"]},
        "resources": {**_ref_list("resources"), "minItems": 1},
    },
}

SCHEMAS = {
    "resources": RESOURCE_SCHEMA,
    "events": EVENT_SCHEMA,
    "curricula": COLLECTION_SCHEMA,
}


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------

def clean_schema(schema):
    """Return a copy of *schema* without the custom ``x-`` keywords and ``$id``."""
    if isinstance(schema, dict):
        return {
            key: clean_schema(value)
            for key, value in schema.items()
            if key != "$id" and not key.startswith("x-")
        }
    if isinstance(schema, list):
        return [clean_schema(item) for item in schema]
    return schema


def humanize_error(error: jsonschema.ValidationError) -> str:
    """Convert a ``jsonschema.ValidationError`` into plain English."""
    path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "(root)"
    msg = error.message
    if error.validator == "required":
        return f"Missing required field at {path}: {msg}"
    if error.validator == "type":
        return f"Wrong data type at '{path}': {msg}"
    if error.validator == "enum":
        return f"Invalid value at '{path}': {msg}"
    if error.validator == "minItems":
        return f"Not enough items at '{path}': {msg}"
    return f"Issue at '{path}': {msg}"


def validate_frontmatter(matter: dict, collection: str) -> list[str]:
    """Validate raw frontmatter for *collection*.

    Returns
    -------
    list[str]
        Human-readable problems, empty when the frontmatter is valid.

    Raises
    ------
    KeyError
        If *collection* has no schema.
    """
    validator = jsonschema.Draft202012Validator(clean_schema(SCHEMAS[collection]))
    errors = sorted(validator.iter_errors(matter), key=lambda e: list(e.absolute_path))
    return [humanize_error(error) for error in errors]


# ---------------------------------------------------------------------------
# Content health report
# ---------------------------------------------------------------------------

@dataclass
class ContentIssue:
    """One problem found in the content tree."""

    collection: str
    entity_id: str
    message: str

    def __str__(self) -> str:
        return f"{self.collection}/{self.entity_id}: {self.message}"


def check_content(manager, locale: str) -> list[ContentIssue]:
    """Check every content file for *locale*.

    Reports YAML entities that do not load, frontmatter that violates its
    schema, and relations that point at missing files.  Nothing is raised
    for bad content; every problem becomes a :class:`ContentIssue`.
    """
    issues: list[ContentIssue] = []

    for collection, store in manager.stores.by_collection().items():
        for entity_id in store.get_ids(locale):
            try:
                store.get_by_id(entity_id, locale)
            except CampusError as exc:
                issues.append(ContentIssue(collection, entity_id, str(exc)))

    for collection, store in manager.document_stores().items():
        for entity_id in store.get_ids(locale):
            try:
                matter = store.read_frontmatter(entity_id, locale)
            except CampusError as exc:
                issues.append(ContentIssue(collection, entity_id, str(exc)))
                continue
            for message in validate_frontmatter(matter, collection):
                issues.append(ContentIssue(collection, entity_id, message))

    graph = manager.build_graph(locale)
    for ref in graph.broken_references():
        issues.append(ContentIssue(
            ref.source_collection,
            ref.source_id,
            f"references '{ref.target_id}' in field '{ref.field}' "
            f"(expected an entry in {ref.target_collection}), "
            f"but no such entry exists.",
        ))

    if issues:
        logger.warning("Found %d content issue(s) for locale %s", len(issues), locale)
    else:
        logger.info("Content for locale %s is valid", locale)
    return issues
