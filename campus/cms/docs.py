"""
campus/cms/docs.py -- Editor documentation pages, ordered by ``order``.
"""

from __future__ import annotations

from pydantic import ValidationError

from campus.cms.base import MdxStore
from campus.errors import FrontmatterError
from campus.files import ContentFile
from campus.mdx import DOCUMENT_OPTIONS, compile_mdx
from campus.models.content import Docs, DocsData, DocsMetadata, DocsPreview


class DocsStore(MdxStore):
    """Pages under ``documentation/``."""

    collection = "documentation"
    frontmatter_model = DocsMetadata

    def get_docs_ids(self, locale: str) -> list[str]:
        return self.get_ids(locale)

    def get_docs_file_path(self, docs_id: str, locale: str):
        return self.get_file_path(docs_id, locale)

    def get_docs_by_id(self, docs_id: str, locale: str) -> Docs:
        file = self._read(docs_id, locale)
        metadata = self._frontmatter(file)
        compiled = compile_mdx(file.text, DOCUMENT_OPTIONS)
        return Docs(
            id=docs_id,
            data=DocsData(metadata=metadata, toc=compiled.toc),
            html=compiled.html,
        )

    def get_docs(self, locale: str) -> list[Docs]:
        docs = [self.get_docs_by_id(did, locale) for did in self.get_ids(locale)]
        return sorted(docs, key=lambda d: d.data.metadata.order)

    def get_docs_preview_by_id(self, docs_id: str, locale: str) -> DocsPreview:
        file = self._read(docs_id, locale)
        return self._preview(docs_id, file)

    def get_docs_previews(self, locale: str) -> list[DocsPreview]:
        previews = [self.get_docs_preview_by_id(did, locale)
                    for did in self.get_ids(locale)]
        return sorted(previews, key=lambda p: p.order)

    def _preview(self, docs_id: str, file: ContentFile) -> DocsPreview:
        try:
            return DocsPreview.model_validate({**file.data["matter"], "id": docs_id})
        except ValidationError as exc:
            raise FrontmatterError(file.path, str(exc)) from exc
