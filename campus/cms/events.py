"""
campus/cms/events.py -- Events with nested sessions.

Events are the only memoized content: a build asks for the same event's
metadata from several pages, and each lookup fans out to every author,
tag, partner and session speaker.  The cache holds the parsed file (whose
text no longer carries its frontmatter) together with the resolved
metadata, keyed by locale and id.

Usage:
    from campus.cms.events import EventStore

    events = EventStore(content_dir / "events", config, stores)
    event = events.get_event_by_id("dh-summer-school", "en")
    event.data.metadata.sessions[0].body.html
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from campus.cms.base import MdxStore, sort_by_date_desc
from campus.cms.entities import EntityStores
from campus.config import SiteConfig
from campus.files import ContentFile
from campus.mdx import FRAGMENT_OPTIONS, compile_fragment, compile_mdx
from campus.models.content import (
    CompiledBody,
    Event,
    EventData,
    EventFrontmatter,
    EventMetadata,
    EventPreview,
    EventPreviewMetadata,
    EventSession,
)

logger = logging.getLogger(__name__)

_RELATION_FIELDS = {"authors", "tags", "categories", "partners", "type", "licence"}


class EventStore(MdxStore):
    """Events under ``content/events``."""

    collection = "events"
    frontmatter_model = EventFrontmatter

    def __init__(self, folder: Path, config: SiteConfig, stores: EntityStores):
        super().__init__(folder, config)
        self.stores = stores
        self._cache: dict[str, dict[str, tuple[ContentFile, EventPreviewMetadata]]] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_event_ids(self, locale: str) -> list[str]:
        return self.get_ids(locale)

    def get_event_file_path(self, event_id: str, locale: str) -> Path:
        return self.get_file_path(event_id, locale)

    def get_event_by_id(self, event_id: str, locale: str) -> Event:
        """Return the compiled event body with compiled about, prep and sessions."""
        file, preview = self._read_cached(event_id, locale)

        sessions = [
            EventSession(
                title=session.title,
                speakers=self.stores.people.get_many(session.speakers, locale),
                body=CompiledBody(html=compile_fragment(session.body)),
                synthesis=session.synthesis,
            )
            for session in preview.sessions
        ]
        prep = compile_fragment(preview.prep)

        metadata = EventMetadata.model_validate({
            **preview.model_dump(exclude={"about", "prep", "sessions"} | _RELATION_FIELDS),
            "authors": preview.authors,
            "tags": preview.tags,
            "categories": preview.categories,
            "partners": preview.partners,
            "type": preview.type,
            "licence": preview.licence,
            "about": CompiledBody(html=compile_fragment(preview.about)),
            "prep": CompiledBody(html=prep) if prep is not None else None,
            "sessions": sessions,
        })

        compiled = compile_mdx(file.text, FRAGMENT_OPTIONS)
        return Event(id=event_id, data=EventData(metadata=metadata), html=compiled.html)

    def get_events(self, locale: str) -> list[Event]:
        """Return all events, newest first."""
        events = [self.get_event_by_id(eid, locale) for eid in self.get_ids(locale)]
        return sort_by_date_desc(events, lambda event: event.data.metadata.date)

    def get_event_preview_by_id(self, event_id: str, locale: str) -> EventPreview:
        _, preview = self._read_cached(event_id, locale)
        return EventPreview.model_validate({"id": event_id, **dict(preview)})

    def get_event_previews(self, locale: str) -> list[EventPreview]:
        """Return metadata for all events, newest first."""
        previews = [self.get_event_preview_by_id(eid, locale)
                    for eid in self.get_ids(locale)]
        return sort_by_date_desc(previews, lambda preview: preview.date)

    def clear_cache(self) -> None:
        """Forget memoized events (e.g. after content changed on disk)."""
        with self._lock:
            self._cache.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read_cached(self, event_id: str, locale: str):
        with self._lock:
            cache = self._cache.setdefault(locale, {})
            if event_id not in cache:
                file = self._read(event_id, locale)
                cache[event_id] = (file, self._metadata(file, locale))
                logger.debug("Cached event %s (%s)", event_id, locale)
            return cache[event_id]

    def _metadata(self, file: ContentFile, locale: str) -> EventPreviewMetadata:
        matter = self._frontmatter(file)
        stores = self.stores
        return EventPreviewMetadata.model_validate({
            **matter.model_dump(exclude=_RELATION_FIELDS | {"sessions"}),
            "sessions": matter.sessions,
            "authors": stores.people.get_many(matter.authors, locale),
            "tags": stores.tags.get_many(matter.tags, locale),
            "categories": stores.categories.get_many(matter.categories, locale),
            "partners": stores.organisations.get_many(matter.partners, locale),
            "type": stores.content_types.get_by_id(matter.type, locale),
            "licence": stores.licences.get_by_id(matter.licence, locale),
        })
