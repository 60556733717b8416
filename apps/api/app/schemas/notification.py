"""Pydantic schemas for notification templates, logs and test sends."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.db.enums import DeliveryStatus, NotificationChannel, NotificationTrigger
from app.schemas.base import CamelModel


class TemplateCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    channel: NotificationChannel
    trigger: NotificationTrigger
    subject: str | None = Field(None, max_length=255)
    body: str = Field(..., min_length=1)
    active: bool = True


class TemplateUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    channel: NotificationChannel | None = None
    trigger: NotificationTrigger | None = None
    subject: str | None = Field(None, max_length=255)
    body: str | None = Field(None, min_length=1)
    active: bool | None = None


class TemplateRead(CamelModel):
    id: UUID
    name: str
    channel: NotificationChannel
    trigger: NotificationTrigger
    subject: str | None
    body: str
    active: bool
    created_at: datetime
    updated_at: datetime


class NotificationLogRead(CamelModel):
    id: UUID
    template_id: UUID | None
    recipient_user_id: UUID | None
    matter_id: UUID | None
    channel: NotificationChannel
    trigger: NotificationTrigger | None
    subject: str | None
    body: str | None
    status: DeliveryStatus
    error: str | None
    created_at: datetime


class NotificationTestRequest(CamelModel):
    template_id: UUID
    matter_id: UUID | None = None
