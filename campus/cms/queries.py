"""
campus/cms/queries.py -- Cross-entity lookups built from previews.

There is no index: each query loads all previews and filters them.  The
content tree is small enough for this to stay cheap at build time.
"""

from __future__ import annotations

import random

from campus.cms.collections import CollectionStore
from campus.cms.events import EventStore
from campus.cms.posts import PostStore
from campus.models.content import CollectionPreview, PostPreview
from campus.utils import pick_random


class ContentQueries:
    """Filtered views over posts, events and curricula."""

    def __init__(self, posts: PostStore, events: EventStore,
                 collections: CollectionStore):
        self.posts = posts
        self.events = events
        self.collections = collections

    def get_post_previews_by_author_id(self, person_id: str,
                                       locale: str) -> list[PostPreview]:
        return [
            post for post in self.posts.get_post_previews(locale)
            if any(author.id == person_id for author in post.authors)
        ]

    def get_post_previews_by_tag_id(self, tag_id: str, locale: str) -> list[PostPreview]:
        return [
            post for post in self.posts.get_post_previews(locale)
            if any(tag.id == tag_id for tag in post.tags)
        ]

    def get_post_previews_by_category_id(self, category_id: str,
                                         locale: str) -> list[PostPreview]:
        return [
            post for post in self.posts.get_post_previews(locale)
            if any(category.id == category_id for category in post.categories)
        ]

    def get_post_previews_by_content_type_id(self, type_id: str,
                                             locale: str) -> list[PostPreview]:
        return [
            post for post in self.posts.get_post_previews(locale)
            if post.type.id == type_id
        ]

    def get_collection_previews_by_resource_id(self, post_id: str,
                                               locale: str) -> list[CollectionPreview]:
        """Return curricula that include the post *post_id*."""
        return [
            collection for collection in self.collections.get_collection_previews(locale)
            if any(resource.id == post_id for resource in collection.resources)
        ]

    def get_resource_count_by_category_id(self, category_id: str, locale: str) -> int:
        """Number of resources listed under a category.

        The ``events`` category is implicit: every event belongs to it.
        """
        if category_id == "events":
            return len(self.events.get_event_previews(locale))
        return len(self.get_post_previews_by_category_id(category_id, locale))

    def get_related_post_previews(self, post_id: str, tag_ids: list[str], locale: str,
                                  count: int,
                                  rng: random.Random | None = None) -> list[PostPreview]:
        """Pick up to *count* random posts that share a tag with *post_id*.

        Posts sharing several tags enter the candidate pool once, so *count*
        distinct posts come back whenever that many related posts exist.
        """
        candidates: dict[str, PostPreview] = {}
        for tag_id in tag_ids:
            for post in self.get_post_previews_by_tag_id(tag_id, locale):
                if post.id != post_id:
                    candidates.setdefault(post.id, post)
        return pick_random(list(candidates.values()), count, rng)
