"""
campus/mdx/ -- MDX compilation.

Turns an MDX body into an HTML fragment plus its table of contents.  The
Markdown dialect is CommonMark with GitHub tables, fenced code and
footnotes; component tags are rendered by :mod:`campus.mdx.components`.

Usage::

    from campus.mdx import compile_mdx, DOCUMENT_OPTIONS

    compiled = compile_mdx(file.text, DOCUMENT_OPTIONS)
    compiled.html, compiled.toc
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field, replace
from typing import Callable

import markdown

from campus.errors import CompileError
from campus.mdx.components import render_components
from campus.mdx.extensions import ContentExtension
from campus.models.content import TocEntry
from campus.utils import slugify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileOptions:
    """Which rewrites the compiler applies."""

    highlight: bool = True
    heading_ids: bool = True
    toc: bool = True
    heading_links: bool = True
    no_referrer_links: bool = True
    lazy_images: bool = True
    image_captions: bool = True
    asset_resolver: Callable[[str], str] | None = None

    def with_assets(self, resolver: Callable[[str], str]) -> "CompileOptions":
        return replace(self, asset_resolver=resolver)


# Full pipeline for standalone documents (posts, curricula, docs).
DOCUMENT_OPTIONS = CompileOptions()

# Event bodies and nested fields: links only, no headings machinery.
FRAGMENT_OPTIONS = CompileOptions(
    highlight=False,
    heading_ids=False,
    toc=False,
    heading_links=False,
    lazy_images=False,
    image_captions=False,
)


@dataclass
class CompiledMdx:
    html: str
    toc: list[TocEntry] = field(default_factory=list)


def _toc_entries(tokens: list[dict]) -> list[TocEntry]:
    return [
        TocEntry(
            depth=token["level"],
            value=html.unescape(token.get("name", "")),
            id=token.get("id"),
            children=_toc_entries(token.get("children", [])),
        )
        for token in tokens
    ]


def _heading_id(value: str, separator: str) -> str:
    return slugify(value).replace("-", separator)


def _build_markdown(options: CompileOptions) -> markdown.Markdown:
    extensions: list = ["extra", "sane_lists"]
    configs: dict = {}

    if options.highlight:
        extensions.append("codehilite")
        configs["codehilite"] = {"guess_lang": False, "css_class": "highlight"}

    if options.heading_ids or options.toc:
        extensions.append("toc")
        configs["toc"] = {
            "permalink": options.heading_links,
            "permalink_class": "heading-link",
            "permalink_title": "",
            "slugify": _heading_id,
        }

    extensions.append(
        ContentExtension(
            no_referrer_links=options.no_referrer_links,
            lazy_images=options.lazy_images,
            image_captions=options.image_captions,
            asset_resolver=options.asset_resolver,
        )
    )
    return markdown.Markdown(extensions=extensions, extension_configs=configs)


def compile_mdx(source: str, options: CompileOptions = DOCUMENT_OPTIONS) -> CompiledMdx:
    """Compile an MDX body to HTML.

    Parameters
    ----------
    source : str
        The MDX text with frontmatter already removed.
    options : CompileOptions
        Selects highlighting, heading ids, table of contents and the HTML
        rewrites.

    Raises
    ------
    CompileError
        If the component markup is invalid or Markdown conversion fails.
    """
    prepared = render_components(source or "")
    md = _build_markdown(options)
    try:
        body = md.convert(prepared)
    except Exception as exc:
        raise CompileError(f"Could not compile content: {exc}") from exc

    toc = _toc_entries(getattr(md, "toc_tokens", [])) if options.toc else []
    return CompiledMdx(html=body, toc=toc)


def compile_fragment(source: str | None) -> str | None:
    """Compile a nested metadata field; ``None`` stays ``None``."""
    if source is None:
        return None
    return compile_mdx(source, FRAGMENT_OPTIONS).html


__all__ = [
    "CompileOptions",
    "CompiledMdx",
    "DOCUMENT_OPTIONS",
    "FRAGMENT_OPTIONS",
    "compile_fragment",
    "compile_mdx",
]
