"""Pydantic schemas for referrals and the public QR landing page."""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.db.enums import ReferralChannel, ReferralStatus
from app.schemas.base import CamelModel


class ReferralCreate(CamelModel):
    client_name: str = Field(..., min_length=1, max_length=255)
    client_email: EmailStr | None = None
    client_phone: str | None = Field(None, max_length=50)
    property_address: str | None = Field(None, max_length=500)
    transaction_type: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=5000)
    channel: ReferralChannel = ReferralChannel.PORTAL
    commission_cents: int | None = Field(None, ge=0)


class ReferralUpdate(CamelModel):
    """Partial update. The QR token is not a field here and cannot be changed."""
    client_name: str | None = Field(None, min_length=1, max_length=255)
    client_email: EmailStr | None = None
    client_phone: str | None = Field(None, max_length=50)
    property_address: str | None = Field(None, max_length=500)
    transaction_type: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=5000)
    status: ReferralStatus | None = None
    commission_cents: int | None = Field(None, ge=0)


class ReferralConvert(CamelModel):
    """Create a matter for the referred client."""
    client_user_id: UUID
    conveyancer_user_id: UUID | None = None
    address: str | None = Field(None, min_length=1, max_length=500)
    settlement_date: date | None = None


class ReferralRead(CamelModel):
    id: UUID
    broker_user_id: UUID
    client_name: str
    client_email: str | None
    client_phone: str | None
    property_address: str | None
    transaction_type: str | None
    notes: str | None
    channel: ReferralChannel
    status: ReferralStatus
    commission_cents: int | None
    qr_token: str | None
    matter_id: UUID | None
    created_at: datetime
    updated_at: datetime


class QrReferralInfo(CamelModel):
    client_name: str
    status: ReferralStatus
    channel: ReferralChannel
    property_address: str | None
    transaction_type: str | None
    created_at: datetime


class QrBrokerInfo(CamelModel):
    name: str
    email: str


class QrLandingRead(CamelModel):
    """Public QR lookup. Contact details and notes are withheld."""
    referral: QrReferralInfo
    broker: QrBrokerInfo | None = None
