"""Broker referrals and commission payouts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.enums import PaymentStatus, ReferralChannel, ReferralStatus


class Referral(Base):
    """
    A broker's introduction of a prospective client.

    qr_token is issued once and never reassigned.
    """

    __tablename__ = "referrals"
    __table_args__ = (Index("idx_referrals_broker_created", "broker_user_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    broker_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    property_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    transaction_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    channel: Mapped[str] = mapped_column(
        String(20), default=ReferralChannel.PORTAL.value, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=ReferralStatus.PENDING.value, nullable=False
    )
    commission_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    qr_token: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    matter_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("matters.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )


class Payment(Base):
    """A commission payout to a broker for a referral."""

    __tablename__ = "payments"
    __table_args__ = (Index("idx_payments_broker", "broker_user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    referral_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("referrals.id", ondelete="SET NULL"), nullable=True
    )
    matter_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("matters.id", ondelete="SET NULL"), nullable=True
    )
    broker_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    gross_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    platform_fee_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    net_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PaymentStatus.PENDING.value, nullable=False
    )
    settled_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
