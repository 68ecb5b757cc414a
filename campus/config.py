"""
campus/config.py -- Site configuration and logging setup.

Configuration lives in an optional ``campus.config.json`` at the project
root.  A missing or unreadable file yields the defaults below; values that
are present are validated by ``SiteConfig``.

Usage:
    from campus.config import load_config

    config = load_config("/srv/campus")
    config.content_path(config_root)   # -> /srv/campus/content
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from campus.errors import ConfigError, UnsupportedLocaleError
from campus.utils import safe_read_json

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "campus.config.json"


class SiteImage(BaseModel):
    src: str
    public_path: str = ""
    alt: str = ""


class SiteFavicon(BaseModel):
    src: str
    maskable: bool = False


class SiteMetadata(BaseModel):
    """Per-locale site metadata used for page titles and feeds."""

    url: str
    title: str
    short_title: str | None = None
    description: str = ""
    favicon: SiteFavicon | None = None
    image: SiteImage | None = None
    twitter: str | None = None


def _default_site_metadata() -> dict[str, SiteMetadata]:
    return {
        "en": SiteMetadata(
            url="https://campus.dariah.eu/en",
            title="Campus",
            short_title="Campus",
            favicon=SiteFavicon(
                src="public/assets/images/logo-maskable.svg", maskable=True
            ),
            image=SiteImage(
                src="public/android-chrome-512x512.png",
                public_path="/android-chrome-512x512.png",
            ),
        ),
    }


class SiteConfig(BaseModel):
    """Validated site configuration.

    Paths are relative to the project root unless absolute.
    """

    model_config = ConfigDict(extra="forbid")

    content_dir: str = "content"
    docs_dir: str = "documentation"
    locales: list[str] = Field(default_factory=lambda: ["en"])
    default_locale: str = "en"
    page_size: int = Field(default=12, gt=0)
    related_posts_count: int = Field(default=4, ge=0)
    site: dict[str, SiteMetadata] = Field(default_factory=_default_site_metadata)

    @model_validator(mode="after")
    def _default_locale_is_configured(self) -> "SiteConfig":
        if not self.locales:
            raise ValueError("at least one locale must be configured")
        if self.default_locale not in self.locales:
            raise ValueError(
                f"default_locale '{self.default_locale}' is not in locales"
            )
        return self

    def content_path(self, root: Path) -> Path:
        return (Path(root) / self.content_dir).resolve()

    def docs_path(self, root: Path) -> Path:
        return (Path(root) / self.docs_dir).resolve()


def load_config(project_root, overrides: dict | None = None) -> SiteConfig:
    """Load ``campus.config.json`` from *project_root*.

    Parameters
    ----------
    project_root : str or pathlib.Path
        The repository root that holds ``content/``.
    overrides : dict, optional
        Values that take precedence over the file.

    Raises
    ------
    ConfigError
        If the merged configuration does not validate.
    """
    path = Path(project_root) / CONFIG_FILENAME
    data = safe_read_json(path, default={})
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top-level value is not an object", path)
        data = {}
    if overrides:
        data = {**data, **overrides}
    try:
        return SiteConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc


def check_locale(config: SiteConfig, locale: str) -> str:
    """Return *locale* unchanged, or raise if the site does not serve it."""
    if locale not in config.locales:
        raise UnsupportedLocaleError(locale, config.locales)
    return locale


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging for build runs."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
