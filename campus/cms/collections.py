"""
campus/cms/collections.py -- Curricula: ordered collections of resources.

A curriculum lists post slugs in ``resources``; they resolve to post
previews in the order the editor chose.
"""

from __future__ import annotations

import logging
from pathlib import Path

from campus.cms.base import MdxStore, sort_by_date_desc
from campus.cms.entities import EntityStores
from campus.cms.posts import PostStore
from campus.config import SiteConfig
from campus.files import ContentFile
from campus.mdx import DOCUMENT_OPTIONS, compile_mdx
from campus.models.content import (
    Collection,
    CollectionData,
    CollectionFrontmatter,
    CollectionMetadata,
    CollectionPreview,
)

logger = logging.getLogger(__name__)


class CollectionStore(MdxStore):
    """Curricula under ``content/curricula``."""

    collection = "curricula"
    frontmatter_model = CollectionFrontmatter

    def __init__(self, folder: Path, config: SiteConfig, stores: EntityStores,
                 posts: PostStore):
        super().__init__(folder, config)
        self.stores = stores
        self.posts = posts

    def get_collection_ids(self, locale: str) -> list[str]:
        return self.get_ids(locale)

    def get_collection_file_path(self, collection_id: str, locale: str) -> Path:
        return self.get_file_path(collection_id, locale)

    def get_collection_by_id(self, collection_id: str, locale: str) -> Collection:
        file = self._read(collection_id, locale)
        metadata = CollectionMetadata.model_validate(self._metadata(file, locale))
        compiled = compile_mdx(file.text, DOCUMENT_OPTIONS)
        return Collection(
            id=collection_id,
            data=CollectionData(metadata=metadata, toc=compiled.toc),
            html=compiled.html,
        )

    def get_collections(self, locale: str) -> list[Collection]:
        collections = [self.get_collection_by_id(cid, locale)
                       for cid in self.get_ids(locale)]
        return sort_by_date_desc(collections, lambda c: c.data.metadata.date)

    def get_collection_preview_by_id(self, collection_id: str,
                                     locale: str) -> CollectionPreview:
        file = self._read(collection_id, locale)
        return CollectionPreview.model_validate(
            {"id": collection_id, **self._metadata(file, locale)}
        )

    def get_collection_previews(self, locale: str) -> list[CollectionPreview]:
        previews = [self.get_collection_preview_by_id(cid, locale)
                    for cid in self.get_ids(locale)]
        return sort_by_date_desc(previews, lambda preview: preview.date)

    def _metadata(self, file: ContentFile, locale: str) -> dict:
        matter = self._frontmatter(file)
        stores = self.stores
        return {
            **matter.model_dump(exclude={"editors", "tags", "licence", "resources"}),
            "editors": stores.people.get_many(matter.editors, locale),
            "tags": stores.tags.get_many(matter.tags, locale),
            "licence": (stores.licences.get_by_id(matter.licence, locale)
                        if matter.licence else None),
            "resources": [self.posts.get_post_preview_by_id(post_id, locale)
                          for post_id in matter.resources],
        }
