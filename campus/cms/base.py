"""
campus/cms/base.py -- Shared plumbing for MDX-backed content stores.

An MDX store maps a slug to ``<folder>/<slug>.mdx``, reads the file, splits
off the YAML frontmatter and validates it.  Subclasses add relation
resolution and compilation.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

from campus.config import SiteConfig, check_locale
from campus.errors import FrontmatterError
from campus.files import ContentFile, extract_frontmatter, read_file, read_folder

logger = logging.getLogger(__name__)


def sort_by_date_desc(items: list, date_of) -> list:
    """Sort newest first; entries with equal dates keep their order."""
    return sorted(items, key=date_of, reverse=True)


class MdxStore:
    """Base class for a folder of MDX files with YAML frontmatter.

    Parameters
    ----------
    folder : pathlib.Path
        Directory holding ``<slug>.mdx`` files.
    config : SiteConfig
        Supplies the configured locales.
    """

    collection = "content"
    extension = ".mdx"
    frontmatter_model: type[BaseModel]

    def __init__(self, folder: Path, config: SiteConfig):
        self.folder = Path(folder)
        self.config = config

    def get_ids(self, locale: str) -> list[str]:
        """Return all ids (slugs)."""
        check_locale(self.config, locale)
        return read_folder(self.folder, self.extension)

    def get_file_path(self, entity_id: str, locale: str) -> Path:
        return self.folder / f"{entity_id}{self.extension}"

    def exists(self, entity_id: str, locale: str) -> bool:
        return self.get_file_path(entity_id, locale).is_file()

    def read_frontmatter(self, entity_id: str, locale: str) -> dict:
        """Return the raw frontmatter mapping with relations left as ids."""
        return self._read(entity_id, locale).data["matter"]

    def _read(self, entity_id: str, locale: str) -> ContentFile:
        check_locale(self.config, locale)
        file = read_file(self.get_file_path(entity_id, locale), self.collection)
        extract_frontmatter(file)
        return file

    def _frontmatter(self, file: ContentFile):
        try:
            return self.frontmatter_model.model_validate(file.data["matter"])
        except ValidationError as exc:
            raise FrontmatterError(file.path, str(exc)) from exc
