"""Pydantic schemas for tasks."""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from app.db.enums import Pillar, TaskStatus
from app.schemas.base import CamelModel


class TaskCreate(CamelModel):
    """Request to create a task."""
    matter_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    status: TaskStatus = TaskStatus.PENDING
    due_date: date | None = None
    category: str | None = Field(None, max_length=50)
    pillar: Pillar | None = None
    assigned_to_user_id: UUID | None = None


class TaskUpdate(CamelModel):
    """Request to update a task (partial)."""
    title: str | None = Field(None, min_length=1, max_length=255)
    status: TaskStatus | None = None
    due_date: date | None = None
    category: str | None = Field(None, max_length=50)
    pillar: Pillar | None = None
    assigned_to_user_id: UUID | None = None


class TaskRead(CamelModel):
    id: UUID
    matter_id: UUID
    title: str
    status: TaskStatus
    due_date: date | None
    category: str | None
    pillar: Pillar | None
    assigned_to_user_id: UUID | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime
