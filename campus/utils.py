"""
campus/utils.py -- Shared helpers for the content pipeline.

JSON I/O used for configuration and metadata dumps, slug handling, and the
small formatting helpers the page layer needs (full names, random picks).

All JSON writes use atomic temp-file-then-os.replace() so that a build
never leaves a half-written file behind.
"""

import json
import logging
import os
import random
import re
import tempfile
import unicodedata

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# JSON I/O (atomic writes)
# ---------------------------------------------------------------------------

def safe_read_json(path, default=None):
    """Read a JSON file, returning *default* if the file is missing or corrupt.

    Parameters
    ----------
    path : str or pathlib.Path
        Absolute path to the JSON file.
    default
        Value returned when the file cannot be read (default ``None``).

    Returns
    -------
    object
        Parsed JSON content, or *default* on failure.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError:
        return default
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not parse JSON file %s", path)
        return default


def safe_write_json(path, data, *, indent=2):
    """Atomically write *data* as JSON to *path*.

    Parent directories are created if they do not exist.

    Parameters
    ----------
    path : str or pathlib.Path
        Absolute path to the target JSON file.
    data
        JSON-serialisable object to write.
    indent : int, optional
        JSON indentation level (default 2).
    """
    path = str(path)
    parent = os.path.dirname(path)
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=indent, ensure_ascii=False)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def slugify(text: str) -> str:
    """Convert a human-readable title to a URL-friendly slug.

    Examples:
        "Digital Humanities"       -> "digital-humanities"
        "Introduction à TEI"      -> "introduction-a-tei"
    """
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return re.sub(r"-+", "-", text).strip("-")


def get_full_name(person) -> str:
    """Join first and last name, skipping an empty first name.

    Accepts a ``Person`` model or a plain dict with camelCase keys.
    """
    if isinstance(person, dict):
        first, last = person.get("firstName"), person.get("lastName")
    else:
        first, last = person.first_name, person.last_name
    return " ".join(part for part in (first, last) if part)


def pick_random(items: list, n: int, rng: random.Random | None = None) -> list:
    """Pick *n* distinct random items from *items*.

    When fewer than *n* items exist, the input list is returned unchanged.
    """
    if len(items) < n:
        return items
    rng = rng or random
    picked: list = []
    seen: set[int] = set()
    # Draw positions, not values, so equal-valued entries stay distinct.
    while len(picked) < n:
        index = rng.randrange(len(items))
        if index in seen:
            continue
        seen.add(index)
        picked.append(items[index])
    return picked


def sort_key_name(value: str | None) -> str:
    """Case- and accent-insensitive sort key for display names."""
    if not value:
        return ""
    text = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in text if not unicodedata.combining(ch)).casefold()
