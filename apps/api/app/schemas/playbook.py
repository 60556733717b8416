"""Pydantic schemas for playbook articles."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.db.enums import Pillar
from app.schemas.base import CamelModel


class ArticleCreate(CamelModel):
    slug: str = Field(..., min_length=1, max_length=150, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title: str = Field(..., min_length=1, max_length=255)
    summary: str | None = Field(None, max_length=500)
    body: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=50)
    pillar: Pillar | None = None
    reading_minutes: int = Field(3, ge=1, le=120)
    published: bool = True


class ArticleListItem(CamelModel):
    id: UUID
    slug: str
    title: str
    summary: str | None
    category: str
    pillar: Pillar | None
    reading_minutes: int


class ArticleRead(ArticleListItem):
    body: str
    published: bool
    created_at: datetime
