"""
campus/models/base.py -- Shared base model for content records.

Content files use camelCase keys (``firstName``, ``featuredImage``); the
Python side uses snake_case attributes.  ``ContentModel`` maps between the
two and serialises back to camelCase with :meth:`ContentModel.to_dict`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ContentModel(BaseModel):
    """Base for every record read from or derived from a content file.

    Unknown keys are kept (``extra='allow'``) because editors add fields
    through the CMS before code knows about them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise with file (camelCase) keys, suitable for JSON output."""
        return self.model_dump(by_alias=True, mode="json")


class EntityRef(ContentModel):
    """Anything addressed by a filesystem slug."""

    id: str
