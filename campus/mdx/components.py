"""
campus/mdx/components.py -- MDX component rendering.

MDX bodies embed a small, fixed set of components (``<Video />``,
``<SideNote>...</SideNote>`` and friends).  Before Markdown runs, every
component tag outside code is replaced by plain HTML.  Block components
become ``markdown="1"`` containers so their children are still parsed as
Markdown by the ``md_in_html`` extension.

Unknown component names are an error: a typo in a tag name should fail the
build, not silently render nothing.
"""

from __future__ import annotations

import html
import json
import logging
import re
from urllib.parse import quote, urlencode

from campus.errors import CompileError

logger = logging.getLogger(__name__)

VIDEO_PROVIDERS = ("youtube", "vimeo", "nakala")

# Fences may be indented (code blocks inside list items).
_CODE_RE = re.compile(
    r"(?P<fence>^[ \t]*(?P<marker>`{3,}|~{3,})[^\n]*\n.*?^[ \t]*(?P=marker)[ \t]*$)"
    r"|(?P<inline>`[^`\n]+`)",
    re.MULTILINE | re.DOTALL,
)

_ESM_RE = re.compile(
    r"^(?:import\s[^\n]*?\bfrom\s*['\"][^'\"\n]+['\"]"
    r"|import\s*['\"][^'\"\n]+['\"]"
    r"|export\s+(?:const|let|var|function|default|\{)[^\n]*)"
    r";?[ \t]*(?:\n|\Z)",
    re.MULTILINE,
)
_MDX_COMMENT_RE = re.compile(r"\{/\*.*?\*/\}", re.DOTALL)

_TAG_RE = re.compile(
    r"<(?P<closing>/?)(?P<name>[A-Z][\w.]*)"
    r"(?P<attrs>(?:\s+[\w-]+(?:\s*=\s*(?:\"[^\"]*\"|'[^']*'|\{[^}]*\}))?)*)"
    r"\s*(?P<selfclosing>/?)>"
)
_ATTR_RE = re.compile(
    r"(?P<key>[\w-]+)(?:\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|\{(?P<expr>[^}]*)\}))?"
)


# ---------------------------------------------------------------------------
# Attribute parsing
# ---------------------------------------------------------------------------

def _parse_expression(expr: str):
    """Evaluate the literal subset of JSX expressions (numbers, booleans, strings)."""
    expr = expr.strip()
    if expr in ("true", "false", "null"):
        return {"true": True, "false": False, "null": None}[expr]
    try:
        return json.loads(expr)
    except ValueError:
        pass
    if len(expr) >= 2 and expr[0] == expr[-1] == "'":
        return expr[1:-1]
    return expr


def parse_attributes(source: str) -> dict:
    """Parse JSX attributes into a dict.

    ``a="x"`` and ``a='x'`` give strings, ``a={4}`` gives literals and a
    bare ``a`` gives ``True``.
    """
    attrs: dict = {}
    for match in _ATTR_RE.finditer(source):
        key = match.group("key")
        if match.group("dq") is not None:
            attrs[key] = match.group("dq")
        elif match.group("sq") is not None:
            attrs[key] = match.group("sq")
        elif match.group("expr") is not None:
            attrs[key] = _parse_expression(match.group("expr"))
        else:
            attrs[key] = True
    return attrs


# ---------------------------------------------------------------------------
# Video URLs
# ---------------------------------------------------------------------------

def get_video_url(provider: str, video_id: str, auto_play: bool = False,
                  start_time: int | None = None) -> str:
    """Return the embed URL for a hosted video.

    Raises
    ------
    CompileError
        If *provider* is not one of :data:`VIDEO_PROVIDERS`.
    """
    path = quote(str(video_id), safe="/")
    if provider == "youtube":
        query = {}
        if auto_play:
            query["autoplay"] = "1"
        if start_time is not None:
            query["start"] = str(start_time)
        url = f"https://www.youtube-nocookie.com/embed/{path}"
    elif provider == "vimeo":
        query = {"autoplay": "1"} if auto_play else {}
        url = f"https://player.vimeo.com/video/{path}"
    elif provider == "nakala":
        query = {}
        url = f"https://api.nakala.fr/embed/{path}"
    else:
        raise CompileError(
            f"Unknown video provider '{provider}'. "
            f"Expected one of: {', '.join(VIDEO_PROVIDERS)}."
        )
    if query:
        url += "?" + urlencode(query)
    return url


# ---------------------------------------------------------------------------
# Component renderers
# ---------------------------------------------------------------------------

def _esc(value) -> str:
    return html.escape(str(value), quote=True)


def _require(name: str, attrs: dict, key: str):
    value = attrs.get(key)
    if value in (None, ""):
        raise CompileError(f"<{name}> is missing the required '{key}' attribute.")
    return value


def _render_video(name: str, attrs: dict, provider: str | None = None) -> str:
    video_id = _require(name, attrs, "id")
    provider = provider or attrs.get("provider") or "youtube"
    start = attrs.get("startTime")
    start_time = None
    if start not in (None, ""):
        try:
            start_time = int(start)
        except (TypeError, ValueError):
            raise CompileError(
                f"<{name}> startTime must be a number of seconds, got {start!r}."
            ) from None
    url = get_video_url(
        provider,
        video_id,
        auto_play=attrs.get("autoPlay") is True,
        start_time=start_time,
    )
    caption = attrs.get("caption")
    parts = [
        '<figure class="video">',
        f'<iframe src="{_esc(url)}" title="Video player" allowfullscreen '
        'allow="autoplay; fullscreen; picture-in-picture" loading="lazy"></iframe>',
    ]
    if caption:
        parts.append(f"<figcaption>{_esc(caption)}</figcaption>")
    parts.append("</figure>")
    return "".join(parts)


def _render_video_card(name: str, attrs: dict) -> str:
    title = attrs.get("title") or ""
    subtitle = attrs.get("subtitle") or ""
    caption = " - ".join(part for part in (title, subtitle) if part)
    video = _render_video(name, {**attrs, "caption": caption})
    image = attrs.get("image")
    parts = ['<div class="video-card">']
    if image:
        parts.append(f'<img src="{_esc(image)}" alt="" loading="lazy">')
    parts.append(f"<strong>{_esc(title)}</strong>")
    if subtitle:
        parts.append(f"<p>{_esc(subtitle)}</p>")
    parts.append(video)
    parts.append("</div>")
    return "".join(parts)


def _render_external_resource(name: str, attrs: dict) -> str:
    url = _require(name, attrs, "url")
    parts = ['<aside class="external-resource">']
    if attrs.get("title"):
        parts.append(f"<strong>{_esc(attrs['title'])}</strong>")
    if attrs.get("subtitle"):
        parts.append(f"<p>{_esc(attrs['subtitle'])}</p>")
    # Stashed raw HTML is not seen by the link treeprocessor.
    parts.append(
        f'<a href="{_esc(url)}" target="_blank" rel="noopener noreferrer">'
        "Go to this resource</a>"
    )
    parts.append("</aside>")
    return "".join(parts)


def _kebab(name: str) -> str:
    name = name.replace(".", "-")
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"-\1", name).lower()


def _data_attributes(attrs: dict, skip=()) -> str:
    out = []
    for key, value in attrs.items():
        if key in skip or value is None or value is False:
            continue
        attr = "data-" + _kebab(key)
        out.append(attr if value is True else f'{attr}="{_esc(value)}"')
    return (" " + " ".join(out)) if out else ""


def _open_side_note(attrs: dict) -> str:
    note_type = attrs.get("type") or "note"
    title = attrs.get("title")
    head = f'<aside class="side-note side-note-{_esc(note_type)}" markdown="1">'
    if title:
        head += f"\n\n<strong>{_esc(title)}</strong>"
    return head


_SELF_CLOSING = {
    "Video": lambda name, attrs: _render_video(name, attrs),
    "YouTube": lambda name, attrs: _render_video(name, attrs, provider="youtube"),
    "Youtube": lambda name, attrs: _render_video(name, attrs, provider="youtube"),
    "VideoCard": _render_video_card,
    "ExternalResource": _render_external_resource,
    "CTA": _render_external_resource,
}

_BLOCK = {
    "SideNote": (lambda attrs: _open_side_note(attrs), "</aside>"),
    "Panel": (lambda attrs: _open_side_note({"type": "info", **attrs}), "</aside>"),
    "Grid": (
        lambda attrs: f'<div class="grid"{_data_attributes(attrs)} markdown="1">',
        "</div>",
    ),
    "Flex": (
        lambda attrs: f'<div class="grid"{_data_attributes(attrs)} markdown="1">',
        "</div>",
    ),
}


def _block_for(name: str):
    if name in _BLOCK:
        return _BLOCK[name]
    if name == "Quiz" or name.startswith("Quiz."):
        css = _kebab(name)
        return (
            lambda attrs: f'<div class="{css}"{_data_attributes(attrs)} markdown="1">',
            "</div>",
        )
    return None


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

def _transform_segment(text: str, stack: list[str]) -> str:
    out: list[str] = []
    pos = 0
    for match in _TAG_RE.finditer(text):
        out.append(text[pos:match.start()])
        pos = match.end()
        name = match.group("name")
        attrs = parse_attributes(match.group("attrs") or "")

        if match.group("closing"):
            if not stack or stack[-1] != name:
                expected = stack[-1] if stack else "nothing"
                raise CompileError(
                    f"Unexpected closing tag </{name}> (expected closing {expected})."
                )
            stack.pop()
            out.append("\n\n" + _block_for(name)[1] + "\n\n")
            continue

        block = _block_for(name)
        if match.group("selfclosing"):
            if name in _SELF_CLOSING:
                out.append("\n\n" + _SELF_CLOSING[name](name, attrs) + "\n\n")
            elif block is not None:
                out.append("\n\n" + block[0](attrs) + "\n\n" + block[1] + "\n\n")
            else:
                raise CompileError(f"Unknown component <{name} />.")
            continue

        if block is None:
            if name in _SELF_CLOSING:
                raise CompileError(f"<{name}> must be self-closing.")
            raise CompileError(f"Unknown component <{name}>.")
        stack.append(name)
        out.append("\n\n" + block[0](attrs) + "\n\n")

    out.append(text[pos:])
    return "".join(out)


def render_components(source: str) -> str:
    """Replace MDX syntax in *source* with Markdown-compatible HTML.

    Drops ``import``/``export`` lines and ``{/* */}`` comments, and renders
    component tags.  Code spans and fenced blocks are left untouched.

    Raises
    ------
    CompileError
        On unknown components, missing required attributes, or unbalanced
        block tags.
    """
    out: list[str] = []
    stack: list[str] = []
    pos = 0
    for match in _CODE_RE.finditer(source):
        out.append(_transform_prose(source[pos:match.start()], stack))
        out.append(match.group(0))
        pos = match.end()
    out.append(_transform_prose(source[pos:], stack))

    if stack:
        raise CompileError(f"Unclosed component <{stack[-1]}>.")
    return "".join(out)


def _transform_prose(text: str, stack: list[str]) -> str:
    text = _ESM_RE.sub("", text)
    text = _MDX_COMMENT_RE.sub("", text)
    return _transform_segment(text, stack)
