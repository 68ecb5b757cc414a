"""
campus/preview.py -- Render unsaved CMS entries for the editor preview pane.

The CMS hands over an entry (``{"slug": ..., "data": {...}}`` with the MDX
``body`` inside ``data``) and the metadata of the entries its relation
widgets point at, nested by field path and collection::

    {"authors": {"people": {"jane-doe": {"firstName": "Jane", ...}}}, ...}

Relations are resolved from that mapping only; nothing is read from disk,
because the entry and its images may not be saved yet.  Ids without
metadata are dropped.  Images go through the CMS asset resolver.

A preview that cannot be built (invalid MDX, required relation missing)
renders as ``None`` so the editor sees a "failed to render" notice instead
of an exception.
"""

from __future__ import annotations

import datetime
import logging
from typing import Callable

from pydantic import ValidationError

from campus.errors import CompileError
from campus.mdx import DOCUMENT_OPTIONS, FRAGMENT_OPTIONS, CompileOptions, compile_mdx
from campus.models.content import (
    Collection,
    CollectionData,
    CollectionMetadata,
    CompiledBody,
    Event,
    EventData,
    EventMetadata,
    Post,
    PostData,
    PostMetadata,
    PostPreview,
)

logger = logging.getLogger(__name__)

AssetResolver = Callable[[str], str]


def _plain(value):
    """Dates picked in the CMS arrive as date objects; content stores strings."""
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def resolve_relation(fields_metadata: dict, path: list[str], entity_id) -> dict | None:
    """Look up ``fields_metadata[*path][entity_id]``; ``None`` if absent."""
    node = fields_metadata
    for key in (*path, entity_id):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    if not isinstance(node, dict):
        return None
    return {"id": entity_id, **_plain(node)}


def resolve_relations(fields_metadata: dict, path: list[str], ids) -> list[dict]:
    if not isinstance(ids, list):
        return []
    resolved = (resolve_relation(fields_metadata, path, entity_id) for entity_id in ids)
    return [item for item in resolved if item is not None]


def _split_entry(entry: dict) -> tuple[str, str, dict]:
    data = _plain(dict(entry.get("data") or {}))
    body = data.pop("body", None) or ""
    return entry.get("slug") or "", body, data


def _options(base: CompileOptions, asset_resolver: AssetResolver | None) -> CompileOptions:
    return base.with_assets(asset_resolver) if asset_resolver else base


def _fragment(source, asset_resolver: AssetResolver | None) -> CompiledBody:
    html = compile_mdx(source or "", _options(FRAGMENT_OPTIONS, asset_resolver)).html
    return CompiledBody(html=html)


def build_post_preview(entry: dict, fields_metadata: dict,
                       asset_resolver: AssetResolver | None = None) -> Post | None:
    """Build a :class:`Post` from an unsaved resource entry."""
    slug, body, matter = _split_entry(entry)
    lookup = fields_metadata or {}
    try:
        metadata = PostMetadata.model_validate({
            **matter,
            "authors": resolve_relations(lookup, ["authors", "people"], matter.get("authors")),
            "editors": resolve_relations(lookup, ["editors", "people"], matter.get("editors")),
            "contributors": resolve_relations(
                lookup, ["contributors", "people"], matter.get("contributors")
            ),
            "tags": resolve_relations(lookup, ["tags", "tags"], matter.get("tags")),
            "categories": resolve_relations(
                lookup, ["categories", "categories"], matter.get("categories")
            ),
            "type": resolve_relation(lookup, ["type", "content-types"], matter.get("type")),
            "licence": resolve_relation(lookup, ["licence", "licences"], matter.get("licence")),
        })
        compiled = compile_mdx(body, _options(DOCUMENT_OPTIONS, asset_resolver))
    except (CompileError, ValidationError) as exc:
        logger.warning("Could not render preview for resource %r: %s", slug, exc)
        return None
    return Post(id=slug, data=PostData(metadata=metadata, toc=compiled.toc),
                html=compiled.html)


def build_event_preview(entry: dict, fields_metadata: dict,
                        asset_resolver: AssetResolver | None = None) -> Event | None:
    """Build an :class:`Event` from an unsaved event entry."""
    slug, body, matter = _split_entry(entry)
    lookup = fields_metadata or {}
    try:
        sessions = [
            {
                **session,
                "speakers": resolve_relations(
                    lookup, ["sessions", "speakers", "people"], session.get("speakers")
                ),
                "body": _fragment(session.get("body"), asset_resolver),
            }
            for session in matter.get("sessions") or []
            if isinstance(session, dict)
        ]
        prep = matter.get("prep")
        metadata = EventMetadata.model_validate({
            **matter,
            "authors": resolve_relations(lookup, ["authors", "people"], matter.get("authors")),
            "tags": resolve_relations(lookup, ["tags", "tags"], matter.get("tags")),
            "categories": resolve_relations(
                lookup, ["categories", "categories"], matter.get("categories")
            ),
            "partners": resolve_relations(
                lookup, ["partners", "organisations"], matter.get("partners")
            ),
            "type": resolve_relation(
                lookup, ["type", "content-types"], matter.get("type", "event")
            ),
            "licence": resolve_relation(
                lookup, ["licence", "licences"], matter.get("licence", "ccby-4.0")
            ),
            "about": _fragment(matter.get("about"), asset_resolver),
            "prep": _fragment(prep, asset_resolver) if prep is not None else None,
            "sessions": sessions,
        })
        compiled = compile_mdx(body, _options(FRAGMENT_OPTIONS, asset_resolver))
    except (CompileError, ValidationError) as exc:
        logger.warning("Could not render preview for event %r: %s", slug, exc)
        return None
    return Event(id=slug, data=EventData(metadata=metadata), html=compiled.html)


def build_collection_preview(entry: dict, fields_metadata: dict,
                             asset_resolver: AssetResolver | None = None
                             ) -> Collection | None:
    """Build a :class:`Collection` from an unsaved curriculum entry.

    Resource metadata must already be in preview shape (relations
    resolved); resources whose metadata does not validate are left out.
    """
    slug, body, matter = _split_entry(entry)
    lookup = fields_metadata or {}

    resources = []
    for item in resolve_relations(lookup, ["resources", "post", "resources"],
                                  matter.get("resources")):
        try:
            resources.append(PostPreview.model_validate(item))
        except ValidationError:
            logger.debug("Dropping unresolved resource %r from preview", item["id"])

    try:
        metadata = CollectionMetadata.model_validate({
            **matter,
            "editors": resolve_relations(lookup, ["editors", "people"], matter.get("editors")),
            "tags": resolve_relations(lookup, ["tags", "tags"], matter.get("tags")),
            "licence": resolve_relation(lookup, ["licence", "licences"], matter.get("licence")),
            "resources": resources,
        })
        compiled = compile_mdx(body, _options(DOCUMENT_OPTIONS, asset_resolver))
    except (CompileError, ValidationError) as exc:
        logger.warning("Could not render preview for curriculum %r: %s", slug, exc)
        return None
    return Collection(id=slug, data=CollectionData(metadata=metadata, toc=compiled.toc),
                      html=compiled.html)
