"""Core knawledger data models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class DocumentMeta(BaseModel):
    """Metadata read from a note's front-matter.

    ``custom_id`` is a user chosen identifier meant for URLs and is
    preferred over the document UUID when present.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    custom_id: Optional[str] = Field(default=None, alias="id")
    title: Optional[str] = None
    reading_time: Optional[int] = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    tags: Optional[List[str]] = None


@dataclass(slots=True)
class Directory:
    """A directory row. Roots have no parent."""

    id: uuid.UUID
    name: str
    path: str
    parent: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_root(self) -> bool:
        return self.parent is None


@dataclass(slots=True)
class Document:
    """A document row before or after insertion."""

    # File name with extension
    file_name: str
    directory: uuid.UUID
    # Canonicalised path
    path: str
    id: Optional[uuid.UUID] = None


@dataclass(slots=True)
class DocumentData:
    """A note read from disk: the markdown body and its metadata."""

    content: str = ""
    meta: DocumentMeta = field(default_factory=DocumentMeta)

