"""Pydantic schemas for vault documents."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.schemas.base import CamelModel


class DocumentCreate(CamelModel):
    matter_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    size_label: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=50)
    locked: bool = False
    file_key: str | None = Field(None, max_length=500)
    file_url: str | None = None


class DocumentUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, max_length=50)
    locked: bool | None = None


class DocumentRead(CamelModel):
    id: UUID
    matter_id: UUID
    name: str
    size_label: str | None
    category: str | None
    uploaded_by_user_id: UUID | None
    locked: bool
    file_key: str | None
    file_url: str | None
    uploaded_at: datetime
