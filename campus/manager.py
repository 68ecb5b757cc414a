"""
campus/manager.py -- Single access point for the content pipeline.

Owns the entity stores, the MDX content stores and the query helpers for
one project root.  The relation graph and the local search index are
built lazily on first access (for the default locale), each behind its
own lock so page builders on worker threads can share one manager.

Usage:
    from campus.manager import ContentManager

    manager = ContentManager("/srv/campus")
    manager.posts.get_post_previews("en")
    manager.graph.referenced_by("tags", "tei")
    manager.search_index.search("digital editions")
    manager.shutdown()
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from campus.cms.collections import CollectionStore
from campus.cms.docs import DocsStore
from campus.cms.entities import EntityStores
from campus.cms.events import EventStore
from campus.cms.posts import PostStore
from campus.cms.queries import ContentQueries
from campus.config import SiteConfig, check_locale, load_config

logger = logging.getLogger(__name__)


class ContentManager:
    """Owns every store for one content tree.

    Parameters
    ----------
    project_root : str or pathlib.Path
        Directory holding ``content/`` and ``documentation/``.
    config : SiteConfig, optional
        Loaded from ``campus.config.json`` under *project_root* when omitted.
    """

    def __init__(self, project_root, config: SiteConfig | None = None):
        self.root = Path(project_root).resolve()
        self.config = config if config is not None else load_config(self.root)

        content = self.config.content_path(self.root)
        self.stores = EntityStores.from_config(self.root, self.config)
        self.posts = PostStore(content / "resources", self.config, self.stores)
        self.events = EventStore(content / "events", self.config, self.stores)
        self.collections = CollectionStore(content / "curricula", self.config,
                                           self.stores, self.posts)
        self.docs = DocsStore(self.config.docs_path(self.root), self.config)
        self.queries = ContentQueries(self.posts, self.events, self.collections)

        self._locks = {
            "graph": threading.RLock(),
            "search_index": threading.RLock(),
        }
        self._modules: dict = {}
        logger.debug("Content manager ready for %s", self.root)

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------

    def document_stores(self) -> dict:
        """Frontmatter-bearing stores keyed by collection name."""
        return {
            self.posts.collection: self.posts,
            self.events.collection: self.events,
            self.collections.collection: self.collections,
        }

    def build_graph(self, locale: str):
        """Return a freshly built relation graph for *locale*."""
        from campus.graph import ContentGraph

        check_locale(self.config, locale)
        return ContentGraph(self.stores, self.document_stores()).build_graph(locale)

    # ------------------------------------------------------------------
    # Lazy modules
    # ------------------------------------------------------------------

    @property
    def graph(self):
        return self._get_module("graph")

    @property
    def search_index(self):
        return self._get_module("search_index")

    def reload(self) -> None:
        """Drop cached events and lazily built modules after content changed."""
        self.events.clear_cache()
        self.shutdown()
        self._modules.clear()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Release resources held by lazily built modules."""
        index = self._modules.pop("search_index", None)
        if index is not None:
            index.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _get_module(self, name):
        if name in self._modules:
            return self._modules[name]

        with self._locks[name]:
            if name in self._modules:
                return self._modules[name]
            instance = self._create_module(name)
            self._modules[name] = instance
            return instance

    def _create_module(self, name):
        locale = self.config.default_locale

        if name == "graph":
            return self.build_graph(locale)

        if name == "search_index":
            from campus.search import SearchIndex, build_search_records

            index = SearchIndex()
            index.rebuild(build_search_records(self, locale))
            return index

        raise KeyError(f"Unknown module: {name}")
