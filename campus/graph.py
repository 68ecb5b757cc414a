"""
campus/graph.py -- Directed graph of content entries and their relations.

Every YAML entity and every resource, event and curriculum becomes a node
named ``"<collection>:<id>"``.  Every relation in frontmatter becomes an
edge from the document to its target.  Relations are read from raw
frontmatter, guided by the ``x-cross-reference`` annotations in
:data:`campus.validation.SCHEMAS`, so a broken relation shows up as a
missing edge instead of an exception.

Usage:
    from campus.graph import ContentGraph

    graph = ContentGraph(stores, documents).build_graph("en")
    graph.referenced_by("people", "jane-doe")
    graph.broken_references()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import networkx as nx

from campus.errors import CampusError
from campus.utils import get_full_name
from campus.validation import SCHEMAS

logger = logging.getLogger(__name__)


def node_id(collection: str, entity_id: str) -> str:
    return f"{collection}:{entity_id}"


@dataclass(frozen=True)
class Reference:
    """A relation found in frontmatter."""

    source_collection: str
    source_id: str
    field: str
    target_collection: str
    target_id: str


def _walk(value, schema: dict, field: str):
    """Yield ``(target_collection, target_id, field)`` for every relation id."""
    xref = schema.get("x-cross-reference")
    if xref:
        if isinstance(value, str) and value:
            yield xref, value, field
        return
    if isinstance(value, list):
        items = schema.get("items", {})
        for item in value:
            yield from _walk(item, items, field)
    elif isinstance(value, dict):
        for key, sub_schema in schema.get("properties", {}).items():
            sub_value = value.get(key, sub_schema.get("default"))
            yield from _walk(sub_value, sub_schema, f"{field}.{key}" if field else key)


def extract_references(collection: str, entity_id: str, matter: dict) -> list[Reference]:
    """Return every relation in *matter*, in field order.

    Fields the editor left out fall back to the schema default (events
    default to type ``event`` and licence ``ccby-4.0``).
    """
    return [
        Reference(collection, entity_id, field, target_collection, target_id)
        for target_collection, target_id, field in _walk(matter, SCHEMAS[collection], "")
    ]


def _entity_name(record: dict, entity_id: str) -> str:
    if "lastName" in record:
        return get_full_name(record) or entity_id
    return record.get("name") or entity_id


class ContentGraph:
    """In-memory directed graph of content relations.

    Parameters
    ----------
    stores : EntityStores
        The YAML entity stores (relation targets).
    documents : dict[str, MdxStore]
        Frontmatter-bearing stores keyed by collection name
        (``resources``, ``events``, ``curricula``).
    """

    def __init__(self, stores, documents: dict):
        self.stores = stores
        self.documents = documents
        self.graph: nx.DiGraph = nx.DiGraph()
        self.locale: str | None = None
        self._broken: list[Reference] = []

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build_graph(self, locale: str) -> "ContentGraph":
        """Rebuild the graph from the files on disk for *locale*."""
        self.graph.clear()
        self._broken = []
        self.locale = locale

        # Pass 1: a node for every entry
        for collection, store in self.stores.by_collection().items():
            for entity_id in store.get_ids(locale):
                try:
                    record = store.read_record(entity_id, locale)
                except CampusError as exc:
                    logger.warning("Unreadable %s entry %s: %s", collection, entity_id, exc)
                    record = {}
                self.graph.add_node(
                    node_id(collection, entity_id),
                    collection=collection,
                    id=entity_id,
                    name=_entity_name(record, entity_id),
                )

        frontmatter: dict[tuple[str, str], dict] = {}
        for collection, store in self.documents.items():
            for entity_id in store.get_ids(locale):
                try:
                    matter = store.read_frontmatter(entity_id, locale)
                except CampusError as exc:
                    logger.warning("Unreadable %s entry %s: %s", collection, entity_id, exc)
                    matter = {}
                frontmatter[(collection, entity_id)] = matter
                self.graph.add_node(
                    node_id(collection, entity_id),
                    collection=collection,
                    id=entity_id,
                    name=matter.get("title") or entity_id,
                )

        # Pass 2: edges; relations to missing files are kept aside
        for (collection, entity_id), matter in frontmatter.items():
            source = node_id(collection, entity_id)
            for ref in extract_references(collection, entity_id, matter):
                target = node_id(ref.target_collection, ref.target_id)
                if target not in self.graph:
                    self._broken.append(ref)
                    continue
                if self.graph.has_edge(source, target):
                    fields = self.graph.edges[source, target]["fields"]
                    if ref.field not in fields:
                        fields.append(ref.field)
                else:
                    self.graph.add_edge(source, target, fields=[ref.field])

        logger.info(
            "Built content graph for %s: %d nodes, %d edges, %d broken references",
            locale,
            self.graph.number_of_nodes(),
            self.graph.number_of_edges(),
            len(self._broken),
        )
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _describe(self, node: str, fields: list[str]) -> dict:
        attrs = self.graph.nodes[node]
        return {
            "collection": attrs["collection"],
            "id": attrs["id"],
            "name": attrs["name"],
            "fields": list(fields),
        }

    def references(self, collection: str, entity_id: str) -> list[dict]:
        """Entries that ``collection:entity_id`` points to.

        Each item is a dict with ``collection``, ``id``, ``name`` and the
        ``fields`` holding the relation.  Unknown entries yield ``[]``.
        """
        source = node_id(collection, entity_id)
        if source not in self.graph:
            return []
        return [
            self._describe(target, data["fields"])
            for _, target, data in self.graph.out_edges(source, data=True)
        ]

    def referenced_by(self, collection: str, entity_id: str) -> list[dict]:
        """Entries that point to ``collection:entity_id``."""
        target = node_id(collection, entity_id)
        if target not in self.graph:
            return []
        return [
            self._describe(source, data["fields"])
            for source, _, data in self.graph.in_edges(target, data=True)
        ]

    def broken_references(self) -> list[Reference]:
        """Relations whose target file does not exist."""
        return list(self._broken)

    def orphans(self) -> list[str]:
        """Sorted node ids with no relations in either direction."""
        return sorted(node for node in self.graph.nodes() if self.graph.degree(node) == 0)

    def get_stats(self) -> dict:
        return {
            "node_count": self.graph.number_of_nodes(),
            "edge_count": self.graph.number_of_edges(),
            "broken_count": len(self._broken),
            "orphan_count": len(self.orphans()),
        }
