"""
campus/cms/entities.py -- YAML-backed entity stores.

People, tags, categories, organisations, licences and content types are
one YAML file per entity, named by slug.  Stores re-read files on every
call: the content tree is the source of truth and a build reads each
record only a handful of times.

Usage:
    from campus.cms.entities import EntityStores

    stores = EntityStores.from_config(root, config)
    person = stores.people.get_by_id("jane-doe", "en")
    tags = stores.tags.get_all("en")          # sorted by name
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, TypeVar

from pydantic import ValidationError

from campus.config import SiteConfig, check_locale
from campus.errors import FrontmatterError
from campus.files import read_folder, read_yaml_record
from campus.models.entities import (
    Category,
    ContentType,
    Licence,
    Organisation,
    Person,
    Tag,
)
from campus.utils import sort_key_name

logger = logging.getLogger(__name__)

E = TypeVar("E")


def _by_name(entity) -> str:
    return sort_key_name(entity.name)


def _by_person_name(person: Person) -> tuple[str, str]:
    return (sort_key_name(person.last_name), sort_key_name(person.first_name))


class YamlStore(Generic[E]):
    """Read-only access to one folder of YAML entity files.

    Parameters
    ----------
    collection : str
        Collection name, used in error messages.
    folder : pathlib.Path
        Directory holding ``<slug>.yml`` files.
    model : type
        Pydantic model the records validate against.
    config : SiteConfig
        Supplies the configured locales.
    sort_key : callable
        Key for :meth:`get_all` ordering.
    """

    extension = ".yml"

    def __init__(self, collection: str, folder: Path, model: type[E],
                 config: SiteConfig, sort_key: Callable = _by_name):
        self.collection = collection
        self.folder = Path(folder)
        self.model = model
        self.config = config
        self.sort_key = sort_key

    def get_ids(self, locale: str) -> list[str]:
        """Return all entity ids (slugs)."""
        check_locale(self.config, locale)
        return read_folder(self.folder, self.extension)

    def get_file_path(self, entity_id: str, locale: str) -> Path:
        return self.folder / f"{entity_id}{self.extension}"

    def read_record(self, entity_id: str, locale: str) -> dict:
        """Return the unvalidated YAML mapping for *entity_id*."""
        check_locale(self.config, locale)
        return read_yaml_record(self.get_file_path(entity_id, locale), self.collection)

    def get_by_id(self, entity_id: str, locale: str) -> E:
        """Load a single entity.

        Raises
        ------
        ContentNotFoundError
            If no file exists for *entity_id*.
        FrontmatterError
            If the file is not valid YAML or fails model validation.
        """
        data = self.read_record(entity_id, locale)
        try:
            return self.model.model_validate({**data, "id": entity_id})
        except ValidationError as exc:
            path = self.get_file_path(entity_id, locale)
            raise FrontmatterError(str(path), str(exc)) from exc

    def get_many(self, ids, locale: str) -> list[E]:
        """Resolve a list of ids in order; a non-list value resolves to ``[]``."""
        if not isinstance(ids, list):
            return []
        return [self.get_by_id(entity_id, locale) for entity_id in ids]

    def get_all(self, locale: str) -> list[E]:
        """Return every entity, sorted."""
        entities = [self.get_by_id(eid, locale) for eid in self.get_ids(locale)]
        entities.sort(key=self.sort_key)
        return entities


@dataclass
class EntityStores:
    """The relation-target stores, grouped so content stores can share them."""

    people: YamlStore[Person]
    tags: YamlStore[Tag]
    categories: YamlStore[Category]
    organisations: YamlStore[Organisation]
    licences: YamlStore[Licence]
    content_types: YamlStore[ContentType]

    @classmethod
    def from_config(cls, project_root, config: SiteConfig) -> "EntityStores":
        content = config.content_path(project_root)
        return cls(
            people=YamlStore("people", content / "people", Person, config,
                             sort_key=_by_person_name),
            tags=YamlStore("tags", content / "tags", Tag, config),
            categories=YamlStore("categories", content / "categories", Category, config),
            organisations=YamlStore("organisations", content / "organisations",
                                    Organisation, config),
            licences=YamlStore("licences", content / "licences", Licence, config),
            content_types=YamlStore("content-types", content / "content-types",
                                    ContentType, config),
        )

    def by_collection(self) -> dict[str, YamlStore]:
        return {
            store.collection: store
            for store in (self.people, self.tags, self.categories,
                          self.organisations, self.licences, self.content_types)
        }
