"""
campus/errors.py -- Exception types raised by the content pipeline.

Each error also derives from the matching builtin
(``FileNotFoundError`` for missing entity files, ``ValueError`` for bad
data), so callers catching the builtin keep working.
"""


class CampusError(Exception):
    """Base class for all content pipeline errors."""


class ContentNotFoundError(CampusError, FileNotFoundError):
    """An entity file does not exist on disk."""

    def __init__(self, collection: str, entity_id: str, path: str = ""):
        self.collection = collection
        self.entity_id = entity_id
        self.path = path
        super().__init__(
            f"Could not find {collection} entry '{entity_id}'. "
            f"Expected a file at {path or 'an unknown location'}."
        )


class FrontmatterError(CampusError, ValueError):
    """Frontmatter or YAML data could not be parsed or validated."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid metadata in {path}: {reason}")


class CompileError(CampusError, ValueError):
    """MDX content could not be compiled to HTML."""


class ConfigError(CampusError, ValueError):
    """Site configuration is invalid."""


class UnsupportedLocaleError(CampusError, ValueError):
    """A locale was requested that the site is not configured for."""

    def __init__(self, locale: str, supported):
        self.locale = locale
        super().__init__(
            f"Locale '{locale}' is not supported. "
            f"Configured locales: {', '.join(supported)}."
        )
