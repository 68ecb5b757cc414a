"""
campus/models/content.py -- MDX-backed content: posts, events, curricula, docs.

Each kind comes in up to three shapes:

    *Frontmatter   the raw YAML block, relations still as slug lists
    *Preview       frontmatter with relations resolved, plus ``id``
    <Kind>         preview metadata, table of contents and compiled body

Dates are ISO date strings and are compared lexically.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field, field_validator

from campus.models.base import ContentModel, EntityRef
from campus.models.entities import (
    Category,
    ContentType,
    Licence,
    Organisation,
    Person,
    Tag,
)

T = TypeVar("T")


def _as_text(value):
    """Version numbers like `1.0` parse as floats; keep them as text."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _none_as_empty(cls, value):
    """Relation lists left blank in the CMS arrive as null."""
    return [] if value is None else value


class TocEntry(ContentModel):
    """One heading in a table of contents."""

    depth: int
    value: str
    id: str | None = None
    children: list[TocEntry] = Field(default_factory=list)


class CompiledBody(ContentModel):
    """A compiled MDX fragment nested inside metadata (event about/prep/sessions)."""

    html: str


class Page(BaseModel, Generic[T]):
    """A single page of a paginated list (1-based)."""

    items: list[T]
    page: int
    pages: int


# ---------------------------------------------------------------------------
# Posts (resources)
# ---------------------------------------------------------------------------

class RemoteHost(ContentModel):
    publisher: str | None = None
    date: str | None = None
    url: str | None = None


class _PostFields(ContentModel):
    uuid: str | None = None
    title: str
    short_title: str | None = None
    lang: str = "en"
    date: str
    version: str | None = None
    featured_image: str | None = None
    abstract: str = ""
    domain: str | None = None
    target_group: str | None = None
    remote: RemoteHost | None = None
    toc: bool = False

    @field_validator("version", mode="before")
    @classmethod
    def version_as_text(cls, value):
        return _as_text(value)


class PostFrontmatter(_PostFields):
    authors: list[str] = Field(default_factory=list)
    editors: list[str] = Field(default_factory=list)
    contributors: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    type: str
    licence: str

    empty_lists = field_validator(
        "authors", "editors", "contributors", "tags", "categories", mode="before"
    )(_none_as_empty)


class PostMetadata(_PostFields):
    authors: list[Person] = Field(default_factory=list)
    editors: list[Person] = Field(default_factory=list)
    contributors: list[Person] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    type: ContentType
    licence: Licence


class PostPreview(PostMetadata):
    id: str


class PostData(ContentModel):
    metadata: PostMetadata
    toc: list[TocEntry] = Field(default_factory=list)


class Post(EntityRef):
    data: PostData
    html: str


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class EventSocial(ContentModel):
    website: str | None = None
    email: str | None = None
    twitter: str | None = None
    flickr: str | None = None


class EventSessionFrontmatter(ContentModel):
    title: str
    speakers: list[str] = Field(default_factory=list)
    body: str = ""
    synthesis: str | None = None

    empty_lists = field_validator("speakers", mode="before")(_none_as_empty)


class EventSession(ContentModel):
    title: str
    speakers: list[Person] = Field(default_factory=list)
    body: CompiledBody
    synthesis: str | None = None


class _EventFields(ContentModel):
    uuid: str | None = None
    title: str
    short_title: str | None = None
    event_type: str | None = None
    lang: str = "en"
    date: str
    logo: str | None = None
    featured_image: str | None = None
    abstract: str = ""
    social: EventSocial | None = None
    synthesis: str | None = None


class EventFrontmatter(_EventFields):
    authors: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    partners: list[str] = Field(default_factory=list)
    type: str = "event"
    licence: str = "ccby-4.0"
    about: str = ""
    prep: str | None = None
    sessions: list[EventSessionFrontmatter] = Field(default_factory=list)

    empty_lists = field_validator(
        "authors", "tags", "categories", "partners", "sessions", mode="before"
    )(_none_as_empty)


class _EventRelations(_EventFields):
    authors: list[Person] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    partners: list[Organisation] = Field(default_factory=list)
    type: ContentType
    licence: Licence


class EventPreviewMetadata(_EventRelations):
    about: str = ""
    prep: str | None = None
    sessions: list[EventSessionFrontmatter] = Field(default_factory=list)


class EventPreview(EventPreviewMetadata):
    id: str


class EventMetadata(_EventRelations):
    about: CompiledBody
    prep: CompiledBody | None = None
    sessions: list[EventSession] = Field(default_factory=list)


class EventData(ContentModel):
    metadata: EventMetadata


class Event(EntityRef):
    data: EventData
    html: str


# ---------------------------------------------------------------------------
# Collections (curricula)
# ---------------------------------------------------------------------------

class _CollectionFields(ContentModel):
    uuid: str | None = None
    title: str
    short_title: str | None = None
    lang: str = "en"
    date: str
    version: str | None = None
    featured_image: str | None = None
    abstract: str = ""

    @field_validator("version", mode="before")
    @classmethod
    def version_as_text(cls, value):
        return _as_text(value)


class CollectionFrontmatter(_CollectionFields):
    editors: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    licence: str | None = None
    resources: list[str] = Field(default_factory=list)

    empty_lists = field_validator("editors", "tags", "resources", mode="before")(
        _none_as_empty
    )


class CollectionMetadata(_CollectionFields):
    editors: list[Person] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    licence: Licence | None = None
    resources: list[PostPreview] = Field(default_factory=list)


class CollectionPreview(CollectionMetadata):
    id: str


class CollectionData(ContentModel):
    metadata: CollectionMetadata
    toc: list[TocEntry] = Field(default_factory=list)


class Collection(EntityRef):
    data: CollectionData
    html: str


# ---------------------------------------------------------------------------
# Documentation
# ---------------------------------------------------------------------------

class DocsMetadata(ContentModel):
    title: str
    order: int = 0


class DocsPreview(DocsMetadata):
    id: str


class DocsData(ContentModel):
    metadata: DocsMetadata
    toc: list[TocEntry] = Field(default_factory=list)


class Docs(EntityRef):
    data: DocsData
    html: str
