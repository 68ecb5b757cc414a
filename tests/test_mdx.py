"""
Tests for campus/mdx -- MDX compilation, components and HTML rewrites.

Validates:
    - Markdown dialect (tables, footnotes, fenced code)
    - Heading ids, heading links and the table of contents
    - External link, lazy image and image caption rewrites
    - Asset resolver for CMS previews
    - Component rendering and component errors
    - Video provider URLs
"""

import pytest

from campus.errors import CompileError
from campus.mdx import (
    DOCUMENT_OPTIONS,
    FRAGMENT_OPTIONS,
    compile_fragment,
    compile_mdx,
)
from campus.mdx.components import get_video_url, parse_attributes, render_components


# ---------------------------------------------------------------------------
# Markdown dialect
# ---------------------------------------------------------------------------

class TestMarkdown:
    """Tests for the Markdown features content relies on."""

    def test_paragraph_and_emphasis(self):
        """Plain Markdown renders to HTML."""
        html = compile_mdx("Some *emphasis* and **strong** text.").html
        assert "<em>emphasis</em>" in html
        assert "<strong>strong</strong>" in html

    def test_tables(self):
        """GitHub-style tables render as <table>."""
        source = "| a | b |\n|---|---|\n| 1 | 2 |\n"
        html = compile_mdx(source).html
        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_footnotes(self):
        """Footnote references and definitions render."""
        html = compile_mdx("Claim.[^1]\n\n[^1]: Source.\n").html
        assert 'class="footnote' in html
        assert "Source." in html

    def test_fenced_code_is_highlighted(self):
        """Fenced code with a language is highlighted in documents."""
        html = compile_mdx("```python\nprint('hi')\n```\n", DOCUMENT_OPTIONS).html
        assert 'class="highlight"' in html

    def test_fragment_code_is_not_highlighted(self):
        """Nested fields skip syntax highlighting."""
        html = compile_mdx("```python\nprint('hi')\n```\n", FRAGMENT_OPTIONS).html
        assert 'class="highlight"' not in html
        assert "<code" in html

    def test_empty_source(self):
        """An empty body compiles to empty HTML."""
        compiled = compile_mdx("")
        assert compiled.html == ""
        assert compiled.toc == []


# ---------------------------------------------------------------------------
# Headings and table of contents
# ---------------------------------------------------------------------------

class TestHeadings:
    """Tests for heading ids, heading links and toc extraction."""

    def test_heading_ids(self):
        """Headings get slug ids."""
        html = compile_mdx("## Getting started\n").html
        assert 'id="getting-started"' in html

    def test_heading_ids_drop_accents(self):
        html = compile_mdx("## Introduction à TEI\n").html
        assert 'id="introduction-a-tei"' in html

    def test_heading_links(self):
        """Headings carry a self-link."""
        html = compile_mdx("## Getting started\n").html
        assert 'class="heading-link"' in html
        assert 'href="#getting-started"' in html

    def test_toc_is_nested(self):
        """Subheadings nest under their parent heading."""
        compiled = compile_mdx("## One\n\n### One A\n\n## Two\n")
        assert [entry.value for entry in compiled.toc] == ["One", "Two"]
        assert compiled.toc[0].depth == 2
        assert compiled.toc[0].id == "one"
        assert compiled.toc[0].children[0].value == "One A"
        assert compiled.toc[0].children[0].depth == 3

    def test_toc_unescapes_entities(self):
        """Heading text in the toc is plain text, not HTML-escaped."""
        compiled = compile_mdx("## Tom & Jerry\n")
        assert compiled.toc[0].value == "Tom & Jerry"

    def test_fragment_has_no_toc_or_ids(self):
        """Fragments have neither heading ids nor a toc."""
        compiled = compile_mdx("## Heading\n", FRAGMENT_OPTIONS)
        assert compiled.toc == []
        assert "id=" not in compiled.html


# ---------------------------------------------------------------------------
# HTML rewrites
# ---------------------------------------------------------------------------

class TestRewrites:
    """Tests for links, images and the asset resolver."""

    def test_external_links_open_in_new_tab(self):
        """External links get target and rel attributes."""
        html = compile_mdx("[site](https://example.org)").html
        assert 'target="_blank"' in html
        assert 'rel="noopener noreferrer"' in html

    def test_internal_links_untouched(self):
        """Relative links and mailto links are left alone."""
        html = compile_mdx("[a](/resource/x) [b](mailto:a@b.c)").html
        assert "target=" not in html
        assert "noreferrer" not in html

    def test_fragment_still_rewrites_links(self):
        """Fragments keep the external link rewrite."""
        html = compile_fragment("[site](https://example.org)")
        assert 'rel="noopener noreferrer"' in html

    def test_lazy_images(self):
        """Images load lazily."""
        html = compile_mdx("![Alt](/img.png)").html
        assert 'loading="lazy"' in html
        assert 'decoding="async"' in html

    def test_image_caption_from_title(self):
        """A titled image alone in a paragraph becomes a figure with caption."""
        html = compile_mdx('![Alt](/img.png "A caption")').html
        assert "<figure>" in html
        assert "<figcaption>A caption</figcaption>" in html
        assert "title=" not in html

    def test_untitled_image_stays_inline(self):
        """Images without a title are not wrapped."""
        html = compile_mdx("![Alt](/img.png)").html
        assert "<figure>" not in html

    def test_asset_resolver(self):
        """Image URLs go through the asset resolver when one is set."""
        options = DOCUMENT_OPTIONS.with_assets(lambda src: "blob:" + src)
        html = compile_mdx("![Alt](/img.png)", options).html
        assert 'src="blob:/img.png"' in html

    def test_compile_fragment_none(self):
        """A missing nested field stays None."""
        assert compile_fragment(None) is None


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

class TestComponents:
    """Tests for MDX component rendering."""

    def test_imports_and_exports_dropped(self):
        """ESM lines are removed; prose starting with 'export' is kept."""
        source = (
            "import { Video } from '@/components'\n"
            "export const meta = {}\n"
            "exported data is useful.\n"
        )
        out = render_components(source)
        assert "import" not in out
        assert "export const" not in out
        assert "exported data is useful." in out

    def test_comments_dropped(self):
        """MDX comments are removed."""
        assert "hidden" not in render_components("Text {/* hidden */} more")

    def test_code_is_left_alone(self):
        """Component tags inside code are not rendered."""
        source = "Use `<Video id=\"x\" />` like this:\n\n```\n<Unknown />\n```\n"
        out = render_components(source)
        assert '`<Video id="x" />`' in out
        assert "<Unknown />" in out

    def test_video(self):
        """<Video> renders a YouTube iframe by default."""
        html = compile_mdx('<Video id="abc123" />').html
        assert "https://www.youtube-nocookie.com/embed/abc123" in html
        assert "<iframe" in html

    def test_video_caption_and_start(self):
        """Caption and start time are honoured."""
        html = compile_mdx('<Video id="abc" startTime={30} caption="Intro" />').html
        assert "start=30" in html
        assert "<figcaption>Intro</figcaption>" in html

    def test_indented_fence_is_left_alone(self):
        """Fenced code inside a list item is not scanned for components."""
        source = "1. Step\n\n    ```java\n    List<String> xs;\n    ```\n"
        assert "List<String> xs;" in render_components(source)
        assert "List" in compile_mdx(source).html

    def test_video_start_time_must_be_numeric(self):
        with pytest.raises(CompileError, match="startTime"):
            compile_mdx('<Video id="abc" startTime="1:30" />')

    def test_video_start_time_as_text(self):
        html = compile_mdx('<Video id="abc" startTime="45" />').html
        assert "start=45" in html

    def test_external_resource_opens_in_new_tab(self):
        html = compile_mdx('<ExternalResource url="https://example.org" />').html
        assert 'target="_blank"' in html
        assert 'rel="noopener noreferrer"' in html

    def test_legacy_youtube(self):
        """The legacy <Youtube> tag still renders."""
        html = compile_mdx('<Youtube id="abc" />').html
        assert "youtube-nocookie.com/embed/abc" in html

    def test_external_resource(self):
        """<ExternalResource> renders a link box."""
        html = compile_mdx(
            '<ExternalResource title="Docs" url="https://example.org/docs" />'
        ).html
        assert 'class="external-resource"' in html
        assert "https://example.org/docs" in html
        assert "<strong>Docs</strong>" in html

    def test_cta_alias(self):
        """<CTA> is rendered like <ExternalResource>."""
        html = compile_mdx('<CTA url="https://example.org" />').html
        assert 'class="external-resource"' in html

    def test_side_note_parses_children(self):
        """Children of block components are still Markdown."""
        html = compile_mdx('<SideNote type="tip">\nSome **bold** text.\n</SideNote>').html
        assert 'class="side-note side-note-tip"' in html
        assert "<strong>bold</strong>" in html

    def test_panel_is_info_side_note(self):
        """<Panel> renders as an info side note."""
        html = compile_mdx("<Panel>\nText\n</Panel>").html
        assert "side-note-info" in html

    def test_quiz_family(self):
        """Quiz sub-components render as kebab-case containers."""
        source = (
            "<Quiz>\n<Quiz.MultipleChoice>\n<Quiz.Question>\nWhy?\n"
            "</Quiz.Question>\n</Quiz.MultipleChoice>\n</Quiz>"
        )
        html = compile_mdx(source).html
        assert 'class="quiz"' in html
        assert 'class="quiz-multiple-choice"' in html
        assert 'class="quiz-question"' in html

    def test_unknown_component_raises(self):
        """Unknown components fail compilation."""
        with pytest.raises(CompileError, match="Unknown component"):
            compile_mdx("<Carousel />")

    def test_unclosed_component_raises(self):
        """A block component without a closing tag fails."""
        with pytest.raises(CompileError, match="Unclosed"):
            compile_mdx("<SideNote>\ntext\n")

    def test_mismatched_closing_tag_raises(self):
        """Closing tags must match the innermost open component."""
        with pytest.raises(CompileError):
            compile_mdx("<SideNote>\ntext\n</Grid>")

    def test_missing_required_attribute_raises(self):
        """A video without an id fails."""
        with pytest.raises(CompileError, match="'id'"):
            compile_mdx("<Video />")


class TestAttributes:
    """Tests for parse_attributes."""

    def test_attribute_kinds(self):
        """Quoted strings, expressions and bare flags are parsed."""
        attrs = parse_attributes(' id="x" title=\'y\' startTime={30} autoPlay')
        assert attrs == {"id": "x", "title": "y", "startTime": 30, "autoPlay": True}

    def test_boolean_expressions(self):
        assert parse_attributes(" autoPlay={false}") == {"autoPlay": False}


class TestVideoUrls:
    """Tests for get_video_url."""

    def test_youtube(self):
        url = get_video_url("youtube", "abc", auto_play=True, start_time=10)
        assert url == "https://www.youtube-nocookie.com/embed/abc?autoplay=1&start=10"

    def test_vimeo(self):
        assert get_video_url("vimeo", "123") == "https://player.vimeo.com/video/123"
        assert get_video_url("vimeo", "123", auto_play=True).endswith("?autoplay=1")

    def test_nakala(self):
        assert get_video_url("nakala", "10.34847/nkl.abc/123") == (
            "https://api.nakala.fr/embed/10.34847/nkl.abc/123"
        )

    def test_unknown_provider(self):
        with pytest.raises(CompileError):
            get_video_url("dailymotion", "x")
