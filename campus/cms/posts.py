"""
campus/cms/posts.py -- Resources (posts).

Usage:
    from campus.cms.posts import PostStore

    posts = PostStore(content_dir / "resources", config, stores)
    post = posts.get_post_by_id("intro-to-tei", "en")
    post.html, post.data.toc, post.data.metadata.authors
    previews = posts.get_post_previews("en")      # newest first
"""

from __future__ import annotations

import logging
from pathlib import Path

from campus.cms.base import MdxStore, sort_by_date_desc
from campus.cms.entities import EntityStores
from campus.config import SiteConfig
from campus.files import ContentFile
from campus.mdx import DOCUMENT_OPTIONS, compile_mdx
from campus.models.content import (
    Post,
    PostData,
    PostFrontmatter,
    PostMetadata,
    PostPreview,
)

logger = logging.getLogger(__name__)

_RELATION_FIELDS = {"authors", "editors", "contributors", "tags", "categories",
                    "type", "licence"}


class PostStore(MdxStore):
    """Posts under ``content/resources``."""

    collection = "resources"
    frontmatter_model = PostFrontmatter

    def __init__(self, folder: Path, config: SiteConfig, stores: EntityStores):
        super().__init__(folder, config)
        self.stores = stores

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_post_ids(self, locale: str) -> list[str]:
        return self.get_ids(locale)

    def get_post_file_path(self, post_id: str, locale: str) -> Path:
        return self.get_file_path(post_id, locale)

    def get_post_by_id(self, post_id: str, locale: str) -> Post:
        """Return compiled content, table of contents and resolved metadata."""
        file = self._read(post_id, locale)
        metadata = self._metadata(file, locale)
        compiled = compile_mdx(file.text, DOCUMENT_OPTIONS)
        return Post(
            id=post_id,
            data=PostData(metadata=PostMetadata.model_validate(metadata),
                          toc=compiled.toc),
            html=compiled.html,
        )

    def get_posts(self, locale: str) -> list[Post]:
        """Return all posts, newest first."""
        posts = [self.get_post_by_id(pid, locale) for pid in self.get_ids(locale)]
        return sort_by_date_desc(posts, lambda post: post.data.metadata.date)

    def get_post_preview_by_id(self, post_id: str, locale: str) -> PostPreview:
        """Return resolved metadata without compiling the body."""
        file = self._read(post_id, locale)
        return PostPreview.model_validate({"id": post_id, **self._metadata(file, locale)})

    def get_post_previews(self, locale: str) -> list[PostPreview]:
        """Return metadata for all posts, newest first."""
        previews = [self.get_post_preview_by_id(pid, locale)
                    for pid in self.get_ids(locale)]
        return sort_by_date_desc(previews, lambda preview: preview.date)

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def _metadata(self, file: ContentFile, locale: str) -> dict:
        """Validate frontmatter and join relation ids to their entities."""
        matter = self._frontmatter(file)
        stores = self.stores
        return {
            **matter.model_dump(exclude=_RELATION_FIELDS),
            "authors": stores.people.get_many(matter.authors, locale),
            "editors": stores.people.get_many(matter.editors, locale),
            "contributors": stores.people.get_many(matter.contributors, locale),
            "tags": stores.tags.get_many(matter.tags, locale),
            "categories": stores.categories.get_many(matter.categories, locale),
            "type": stores.content_types.get_by_id(matter.type, locale),
            "licence": stores.licences.get_by_id(matter.licence, locale),
        }
