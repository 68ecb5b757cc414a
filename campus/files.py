"""
campus/files.py -- Filesystem access for content collections.

Every collection is a folder of ``<slug><extension>`` files.  The slug is
the entity id; there is no separate index.  YAML is loaded with core-schema
semantics: ISO dates stay strings so they sort lexically and serialise
unchanged.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from campus.errors import ContentNotFoundError, FrontmatterError

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?P<matter>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class _CoreSchemaLoader(yaml.SafeLoader):
    """SafeLoader without the implicit timestamp resolver."""


_CoreSchemaLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class ContentFile:
    """A content file read from disk.

    ``text`` holds the body; after :func:`extract_frontmatter` the YAML
    block is removed from it and parsed into ``data["matter"]``.
    """

    path: str
    text: str
    data: dict = field(default_factory=dict)


def load_yaml(text: str, path: str = "<string>"):
    """Parse YAML without converting timestamps.

    Raises
    ------
    FrontmatterError
        If *text* is not valid YAML.
    """
    try:
        return yaml.load(text, Loader=_CoreSchemaLoader)
    except yaml.YAMLError as exc:
        raise FrontmatterError(path, str(exc)) from exc


def read_folder(folder, extension: str) -> list[str]:
    """Return the sorted slugs of all files in *folder* ending in *extension*."""
    folder = Path(folder)
    if not folder.is_dir():
        logger.debug("Content folder %s does not exist", folder)
        return []
    return sorted(
        entry.name[: -len(extension)]
        for entry in folder.iterdir()
        if entry.is_file() and entry.name.endswith(extension)
    )


def read_file(path, collection: str = "content") -> ContentFile:
    """Read a UTF-8 content file.

    Raises
    ------
    ContentNotFoundError
        If the file does not exist.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ContentNotFoundError(collection, path.stem, str(path)) from None
    return ContentFile(path=str(path), text=text)


def extract_frontmatter(file: ContentFile) -> dict:
    """Move the leading YAML block of *file* into ``file.data["matter"]``.

    Idempotent: a file whose frontmatter was already extracted is returned
    as is.
    """
    if "matter" in file.data:
        return file.data["matter"]

    match = _FRONTMATTER_RE.match(file.text)
    if match is None:
        file.data["matter"] = {}
        return file.data["matter"]

    matter = load_yaml(match.group("matter"), file.path)
    if matter is None:
        matter = {}
    if not isinstance(matter, dict):
        raise FrontmatterError(file.path, "frontmatter must be a mapping")

    file.data["matter"] = matter
    file.text = file.text[match.end():]
    return matter


def read_yaml_record(path, collection: str) -> dict:
    """Read a YAML entity file and return its mapping."""
    file = read_file(path, collection)
    data = load_yaml(file.text, file.path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(file.path, "expected a mapping at the top level")
    return data
