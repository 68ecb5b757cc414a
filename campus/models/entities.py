"""
campus/models/entities.py -- Flat YAML-backed entities.

These are the relation targets: posts, events and curricula refer to them
by slug.
"""

from __future__ import annotations

from campus.models.base import EntityRef


class Person(EntityRef):
    first_name: str | None = None
    last_name: str
    avatar: str | None = None
    description: str | None = None
    email: str | None = None
    website: str | None = None
    twitter: str | None = None
    orcid: str | None = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def display_name(self) -> str:
        return self.full_name


class Tag(EntityRef):
    name: str
    description: str | None = None

    @property
    def display_name(self) -> str:
        return self.name


class Category(EntityRef):
    name: str
    description: str | None = None
    host: str | None = None
    image: str | None = None

    @property
    def display_name(self) -> str:
        return self.name


class Organisation(EntityRef):
    name: str
    logo: str | None = None
    url: str | None = None

    @property
    def display_name(self) -> str:
        return self.name


class Licence(EntityRef):
    name: str
    url: str | None = None

    @property
    def display_name(self) -> str:
        return self.name


class ContentType(EntityRef):
    name: str
    description: str | None = None

    @property
    def display_name(self) -> str:
        return self.name
