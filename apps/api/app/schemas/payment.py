"""Pydantic schemas for commission payments."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.db.enums import PaymentStatus
from app.schemas.base import CamelModel


class PaymentCreate(CamelModel):
    referral_id: UUID
    gross_amount_cents: int = Field(..., gt=0)


class PaymentUpdate(CamelModel):
    status: PaymentStatus


class PaymentRead(CamelModel):
    id: UUID
    referral_id: UUID | None
    matter_id: UUID | None
    broker_user_id: UUID
    gross_amount_cents: int
    platform_fee_cents: int
    net_amount_cents: int
    status: PaymentStatus
    settled_at: datetime | None
    created_at: datetime
