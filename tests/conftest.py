"""
Shared pytest fixtures for the campus test suite.

Provides:
    - content_root: a temporary project root with a small but complete
      content tree (people, tags, categories, organisations, licences,
      content types, resources, events, curricula, documentation)
    - config: the default SiteConfig
    - stores / manager: stores wired to content_root
    - write_file: helper to add or overwrite content files in a test
"""

import sys
import textwrap
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure campus/ is importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from campus.cms.entities import EntityStores  # noqa: E402
from campus.config import SiteConfig  # noqa: E402
from campus.manager import ContentManager  # noqa: E402


# ---------------------------------------------------------------------------
# Sample content
# ---------------------------------------------------------------------------

YAML_FILES = {
    "people/jane-doe.yml": """
        firstName: Jane
        lastName: Doe
        description: Digital editions specialist.
        orcid: 0000-0002-1825-0097
    """,
    "people/john-smith.yml": """
        firstName: John
        lastName: Smith
        twitter: "@jsmith"
    """,
    "people/ana-alvarez.yml": """
        firstName: Ána
        lastName: Álvarez
    """,
    "tags/tei.yml": """
        name: TEI
        description: Text Encoding Initiative
    """,
    "tags/digital-editions.yml": """
        name: Digital editions
    """,
    "tags/python.yml": """
        name: Python
    """,
    "categories/dariah.yml": """
        name: DARIAH
        description: Resources produced by DARIAH.
    """,
    "categories/events.yml": """
        name: Events
    """,
    "categories/empty.yml": """
        name: Empty Source
    """,
    "organisations/ngo.yml": """
        name: Example Organisation
        url: https://example.org
    """,
    "licences/ccby-4.0.yml": """
        name: CC BY 4.0
        url: https://creativecommons.org/licenses/by/4.0/
    """,
    "content-types/training-module.yml": """
        name: Training module
    """,
    "content-types/event.yml": """
        name: Event
    """,
}

MDX_FILES = {
    "resources/intro-to-tei.mdx": """
        ---
        uuid: 5a1b6f9e-1d1e-4d1c-9a8f-000000000001
        title: Introduction to TEI
        lang: en
        date: 2021-03-01
        version: 1.0
        authors:
          - jane-doe
        editors:
          - john-smith
        tags:
          - tei
          - digital-editions
        categories:
          - dariah
        type: training-module
        licence: ccby-4.0
        abstract: Learn the basics of TEI.
        targetGroup: Domain researchers
        toc: true
        ---

        import { Figure } from '@/components'

        ## Getting started

        Read the [guidelines](https://tei-c.org/guidelines/) first.

        ### Details

        <SideNote type="tip" title="Remember">
        Always validate **your** documents.
        </SideNote>
    """,
    "resources/digital-editions.mdx": """
        ---
        title: Digital editions
        lang: en
        date: 2022-05-10
        version: 2.0
        authors:
          - john-smith
        editors:
        tags:
          - digital-editions
        categories:
          - dariah
        type: training-module
        licence: ccby-4.0
        abstract: What makes an edition digital.
        ---

        An edition is more than a scan.
    """,
    "resources/data-cleaning.mdx": """
        ---
        title: Data cleaning
        lang: en
        date: 2020-01-15
        version: 1.1
        authors:
          - jane-doe
          - ana-alvarez
        tags: []
        categories:
          - dariah
        type: training-module
        licence: ccby-4.0
        abstract: Tidy data before analysis.
        ---

        Clean your data.
    """,
    "events/summer-school.mdx": """
        ---
        title: DH Summer School
        lang: en
        date: 2021-07-01
        authors:
          - jane-doe
        tags:
          - tei
        categories:
          - events
        partners:
          - ngo
        abstract: A week of digital humanities.
        about: Welcome to **the** school.
        sessions:
          - title: Opening
            speakers:
              - john-smith
            body: An *introductory* talk.
        ---

        The event body.
    """,
    "curricula/tei-basics.mdx": """
        ---
        title: TEI basics
        lang: en
        date: 2021-09-01
        editors:
          - jane-doe
        tags:
          - tei
        licence: ccby-4.0
        abstract: Everything to get started with TEI.
        resources:
          - intro-to-tei
          - digital-editions
        ---

        ## Overview

        Work through the resources in order.
    """,
}

DOCS_FILES = {
    "getting-started.mdx": """
        ---
        title: Getting started
        order: 2
        ---

        ## Install

        Clone the repository.
    """,
    "writing-content.mdx": """
        ---
        title: Writing content
        order: 1
        ---

        Write MDX.
    """,
}


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def content_root(tmp_path):
    """Create a temporary project root with a sample content tree.

    Layout:
        content/<collection>/<slug>.yml   (entities)
        content/<collection>/<slug>.mdx   (resources, events, curricula)
        documentation/<slug>.mdx

    Returns the path to the temporary project root.
    """
    root = tmp_path / "campus"
    for rel_path, text in {**YAML_FILES, **MDX_FILES}.items():
        _write(root / "content" / rel_path, text)
    for rel_path, text in DOCS_FILES.items():
        _write(root / "documentation" / rel_path, text)
    return root


@pytest.fixture
def write_file(content_root):
    """Return a helper that writes a file relative to the project root."""
    def _writer(rel_path: str, text: str) -> Path:
        path = content_root / rel_path
        _write(path, text)
        return path
    return _writer


@pytest.fixture
def config():
    return SiteConfig()


@pytest.fixture
def stores(content_root, config):
    return EntityStores.from_config(content_root, config)


@pytest.fixture
def manager(content_root, config):
    m = ContentManager(content_root, config=config)
    yield m
    m.shutdown()
