"""
campus/cms/ -- Content resolution: read files, resolve relations, compile.

Submodules:
    entities     YAML-backed relation targets (people, tags, ...).
    base         Shared MDX store plumbing.
    posts        Resources.
    events       Events with sessions (memoized).
    collections  Curricula.
    docs         Editor documentation.
    queries      Filtered cross-entity lookups.
"""

from campus.cms.collections import CollectionStore
from campus.cms.docs import DocsStore
from campus.cms.entities import EntityStores, YamlStore
from campus.cms.events import EventStore
from campus.cms.posts import PostStore
from campus.cms.queries import ContentQueries

__all__ = [
    "CollectionStore",
    "ContentQueries",
    "DocsStore",
    "EntityStores",
    "EventStore",
    "PostStore",
    "YamlStore",
]
