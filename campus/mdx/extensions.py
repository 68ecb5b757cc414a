"""
campus/mdx/extensions.py -- Python-Markdown tree processors for content HTML.

Each processor is a small rewrite of the element tree after inline parsing:

    NoReferrerLinks   external links open in a new tab without a referrer
    LazyImages        images load lazily and decode asynchronously
    ImageCaptions     a paragraph holding one titled image becomes a figure
    AssetResolver     image URLs are rewritten by a callback (CMS preview)
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from typing import Callable

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

_EXTERNAL_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*:")

# Must run after the inline processor (priority 20).
_PRIORITY = 4


class NoReferrerLinksProcessor(Treeprocessor):
    def run(self, root):
        for link in root.iter("a"):
            href = link.get("href", "")
            if _EXTERNAL_RE.match(href) and not href.startswith("mailto:"):
                link.set("target", "_blank")
                link.set("rel", "noopener noreferrer")


class LazyImagesProcessor(Treeprocessor):
    def run(self, root):
        for image in root.iter("img"):
            image.set("loading", "lazy")
            image.set("decoding", "async")


class ImageCaptionsProcessor(Treeprocessor):
    def run(self, root):
        for parent in list(root.iter()):
            for index, child in enumerate(list(parent)):
                if child.tag != "p" or len(child) != 1:
                    continue
                image = child[0]
                if image.tag != "img" or not image.get("title"):
                    continue
                if (child.text or "").strip() or (image.tail or "").strip():
                    continue
                figure = etree.Element("figure")
                figure.tail = child.tail
                image.tail = None
                figure.append(image)
                caption = etree.SubElement(figure, "figcaption")
                caption.text = image.get("title")
                del image.attrib["title"]
                parent.remove(child)
                parent.insert(index, figure)


class AssetResolverProcessor(Treeprocessor):
    def __init__(self, md, resolve: Callable[[str], str]):
        super().__init__(md)
        self.resolve = resolve

    def run(self, root):
        for image in root.iter("img"):
            src = image.get("src")
            if src:
                image.set("src", str(self.resolve(src)))


class ContentExtension(Extension):
    """Registers the processors selected by the compile options."""

    def __init__(self, *, no_referrer_links=True, lazy_images=True,
                 image_captions=True, asset_resolver=None, **kwargs):
        self.no_referrer_links = no_referrer_links
        self.lazy_images = lazy_images
        self.image_captions = image_captions
        self.asset_resolver = asset_resolver
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        if self.asset_resolver is not None:
            md.treeprocessors.register(
                AssetResolverProcessor(md, self.asset_resolver),
                "campus_assets", _PRIORITY + 3,
            )
        if self.image_captions:
            md.treeprocessors.register(
                ImageCaptionsProcessor(md), "campus_captions", _PRIORITY + 2,
            )
        if self.lazy_images:
            md.treeprocessors.register(
                LazyImagesProcessor(md), "campus_lazy_images", _PRIORITY + 1,
            )
        if self.no_referrer_links:
            md.treeprocessors.register(
                NoReferrerLinksProcessor(md), "campus_no_referrer", _PRIORITY,
            )
