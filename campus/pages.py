"""
campus/pages.py -- Data for statically generated pages.

Each route has a ``get_*_paths`` function listing every page to generate
(``{"params": {...}, "locale": ...}`` dicts, one per page and locale) and
a ``get_*_page`` function returning the data that page renders.

Usage:
    from campus.pages import get_resource_page, get_resource_paths

    for path in get_resource_paths(manager):
        page = get_resource_page(manager, path["params"]["id"], path["locale"])
        page.to_dict()
"""

from __future__ import annotations

import logging
import random

from pydantic import Field

from campus.git import get_last_updated_timestamp
from campus.models.base import ContentModel
from campus.models.content import (
    Collection,
    CollectionPreview,
    Docs,
    DocsPreview,
    Event,
    Page,
    Post,
    PostPreview,
)
from campus.models.entities import Category, Person, Tag
from campus.paginate import get_page, get_page_range

logger = logging.getLogger(__name__)


class CategoryWithCount(Category):
    posts: int


class ResourcePage(ContentModel):
    resource: Post | Event
    related: list[PostPreview] = Field(default_factory=list)
    curricula: list[CollectionPreview] = Field(default_factory=list)
    last_updated_at: str | None = None


class AuthorPage(ContentModel):
    author: Person
    posts: Page


class TagPage(ContentModel):
    tag: Tag
    posts: Page


class SourcesPage(ContentModel):
    categories: Page


class CurriculumPage(ContentModel):
    curriculum: Collection
    last_updated_at: str | None = None


class DocsPage(ContentModel):
    docs: Docs
    nav: list[DocsPreview] = Field(default_factory=list)
    last_updated_at: str | None = None


def _path(locale: str, **params) -> dict:
    return {"params": params, "locale": locale}


# ---------------------------------------------------------------------------
# /resource/[id]
# ---------------------------------------------------------------------------

def get_resource_paths(manager) -> list[dict]:
    """One page per post and per event; both share the ``/resource`` route."""
    paths = []
    for locale in manager.config.locales:
        ids = manager.posts.get_post_ids(locale) + manager.events.get_event_ids(locale)
        paths.extend(_path(locale, id=resource_id) for resource_id in ids)
    return paths


def get_resource_page(manager, resource_id: str, locale: str,
                      rng: random.Random | None = None) -> ResourcePage:
    """Return a post with related posts and curricula, or else the event.

    Raises
    ------
    ContentNotFoundError
        If neither a post nor an event has the id *resource_id*.
    """
    posts = manager.posts
    if posts.exists(resource_id, locale):
        post = posts.get_post_by_id(resource_id, locale)
        tag_ids = [tag.id for tag in post.data.metadata.tags]
        related = manager.queries.get_related_post_previews(
            resource_id, tag_ids, locale, manager.config.related_posts_count, rng
        )
        curricula = manager.queries.get_collection_previews_by_resource_id(
            resource_id, locale
        )
        file_path = posts.get_post_file_path(resource_id, locale)
        return ResourcePage(
            resource=post,
            related=related,
            curricula=curricula,
            last_updated_at=get_last_updated_timestamp(file_path),
        )

    logger.debug("No post %s; rendering event instead", resource_id)
    event = manager.events.get_event_by_id(resource_id, locale)
    file_path = manager.events.get_event_file_path(resource_id, locale)
    return ResourcePage(
        resource=event,
        last_updated_at=get_last_updated_timestamp(file_path),
    )


# ---------------------------------------------------------------------------
# /author/[id]/[page]
# ---------------------------------------------------------------------------

def get_author_paths(manager) -> list[dict]:
    """One page per person and page of authored posts (at least one)."""
    paths = []
    page_size = manager.config.page_size
    for locale in manager.config.locales:
        for person_id in manager.stores.people.get_ids(locale):
            posts = manager.queries.get_post_previews_by_author_id(person_id, locale)
            paths.extend(
                _path(locale, id=person_id, page=str(page))
                for page in get_page_range(posts, page_size)
            )
    return paths


def get_author_page(manager, person_id: str, page: int, locale: str) -> AuthorPage:
    author = manager.stores.people.get_by_id(person_id, locale)
    posts = manager.queries.get_post_previews_by_author_id(person_id, locale)
    return AuthorPage(author=author,
                      posts=get_page(posts, manager.config.page_size, page))


# ---------------------------------------------------------------------------
# /tags/[id]/[page]
# ---------------------------------------------------------------------------

def get_tag_paths(manager) -> list[dict]:
    paths = []
    page_size = manager.config.page_size
    for locale in manager.config.locales:
        for tag_id in manager.stores.tags.get_ids(locale):
            posts = manager.queries.get_post_previews_by_tag_id(tag_id, locale)
            paths.extend(
                _path(locale, id=tag_id, page=str(page))
                for page in get_page_range(posts, page_size)
            )
    return paths


def get_tag_page(manager, tag_id: str, page: int, locale: str) -> TagPage:
    tag = manager.stores.tags.get_by_id(tag_id, locale)
    posts = manager.queries.get_post_previews_by_tag_id(tag_id, locale)
    return TagPage(tag=tag, posts=get_page(posts, manager.config.page_size, page))


# ---------------------------------------------------------------------------
# /sources/[page]
# ---------------------------------------------------------------------------

def get_sources_paths(manager) -> list[dict]:
    paths = []
    for locale in manager.config.locales:
        ids = manager.stores.categories.get_ids(locale)
        paths.extend(
            _path(locale, page=str(page))
            for page in get_page_range(ids, manager.config.page_size)
        )
    return paths


def get_sources_page(manager, page: int, locale: str) -> SourcesPage:
    """Categories with their resource counts.

    Pagination happens over all categories; categories without resources
    are removed from the page afterwards, so a page can hold fewer than
    ``page_size`` entries.
    """
    categories = get_page(manager.stores.categories.get_all(locale),
                          manager.config.page_size, page)
    counted = []
    for category in categories.items:
        count = manager.queries.get_resource_count_by_category_id(category.id, locale)
        if count > 0:
            counted.append(CategoryWithCount(**dict(category), posts=count))
    return SourcesPage(
        categories=Page(
            items=counted, page=categories.page, pages=categories.pages
        )
    )


# ---------------------------------------------------------------------------
# /curricula/[id] and /docs/[id]
# ---------------------------------------------------------------------------

def get_curriculum_paths(manager) -> list[dict]:
    return [
        _path(locale, id=collection_id)
        for locale in manager.config.locales
        for collection_id in manager.collections.get_collection_ids(locale)
    ]


def get_curriculum_page(manager, collection_id: str, locale: str) -> CurriculumPage:
    curriculum = manager.collections.get_collection_by_id(collection_id, locale)
    file_path = manager.collections.get_collection_file_path(collection_id, locale)
    return CurriculumPage(curriculum=curriculum,
                          last_updated_at=get_last_updated_timestamp(file_path))


def get_docs_paths(manager) -> list[dict]:
    return [
        _path(locale, id=docs_id)
        for locale in manager.config.locales
        for docs_id in manager.docs.get_docs_ids(locale)
    ]


def get_docs_page(manager, docs_id: str, locale: str) -> DocsPage:
    """A documentation page plus the ordered navigation of all pages."""
    docs = manager.docs.get_docs_by_id(docs_id, locale)
    file_path = manager.docs.get_docs_file_path(docs_id, locale)
    return DocsPage(
        docs=docs,
        nav=manager.docs.get_docs_previews(locale),
        last_updated_at=get_last_updated_timestamp(file_path),
    )
