"""
campus/models/ -- Pydantic v2 models for content records.

Submodules:
    base        ContentModel (camelCase aliases) and EntityRef.
    entities    YAML-backed relation targets (Person, Tag, ...).
    content     MDX-backed posts, events, curricula and docs.
"""

from campus.models.base import ContentModel, EntityRef
from campus.models.content import (
    Collection,
    CollectionFrontmatter,
    CollectionPreview,
    CompiledBody,
    Docs,
    DocsPreview,
    Event,
    EventFrontmatter,
    EventPreview,
    Page,
    Post,
    PostFrontmatter,
    PostPreview,
    TocEntry,
)
from campus.models.entities import (
    Category,
    ContentType,
    Licence,
    Organisation,
    Person,
    Tag,
)

__all__ = [
    "Category",
    "Collection",
    "CollectionFrontmatter",
    "CollectionPreview",
    "CompiledBody",
    "ContentModel",
    "ContentType",
    "Docs",
    "DocsPreview",
    "EntityRef",
    "Event",
    "EventFrontmatter",
    "EventPreview",
    "Licence",
    "Organisation",
    "Page",
    "Person",
    "Post",
    "PostFrontmatter",
    "PostPreview",
    "Tag",
    "TocEntry",
]
