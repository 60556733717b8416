"""Pydantic schemas for messaging, chat, verification and vendor passthroughs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import EmailStr, Field

from app.db.enums import VoiStatus
from app.schemas.base import CamelModel


class EmailSendRequest(CamelModel):
    to: EmailStr
    subject: str = Field(..., min_length=1, max_length=255)
    html: str = Field(..., min_length=1)


class SmsSendRequest(CamelModel):
    to: str = Field(..., min_length=6, max_length=50)
    body: str = Field(..., min_length=1, max_length=1600)


class SendResult(CamelModel):
    id: str | None = None
    status: str = "sent"


class ChatMessageCreate(CamelModel):
    text: str = Field(..., min_length=1, max_length=4000)


class ChatMessageRead(CamelModel):
    id: str
    matter_id: UUID
    sender_user_id: UUID
    sender_name: str
    text: str
    created_at: datetime


class VerificationStartRead(CamelModel):
    session_id: str
    url: str | None = None
    voi_status: VoiStatus


class VerificationStatusRead(CamelModel):
    session_id: str
    status: str
    decision: dict[str, Any] | None = None


class MapsTokenRead(CamelModel):
    token: str
    expires_at: datetime


class ServiceStatusRead(CamelModel):
    email: bool
    sms: bool
    verification: bool
    maps: bool
    smokeball: bool
    pexa: bool
