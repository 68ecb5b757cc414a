"""
campus -- Content pipeline for the DARIAH-Campus learning platform.

Reads resources, events, curricula and documentation from MDX files with
YAML frontmatter, resolves their relations to YAML entity files, compiles
the Markdown to HTML and assembles the data each static page needs.

Modules:
    config      SiteConfig, load_config, logging setup.
    errors      Exception hierarchy.
    files       Folder listing, file reading, frontmatter extraction.
    mdx         MDX to HTML compilation.
    models      Pydantic models for entities and content.
    cms         Stores for every collection plus cross-entity queries.
    paginate    Fixed-size pagination.
    pages       Per-route page data.
    git         Last-updated timestamps.
    graph       Relation graph (networkx).
    validation  Frontmatter schemas and content checks.
    preview     CMS live preview rendering.
    search      Search records and a local FTS index.
    manager     ContentManager, the single access point.
"""

from campus.manager import ContentManager

__version__ = "1.0.0"

__all__ = ["ContentManager", "__version__"]
