"""Matters, their tasks and vault documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_MATTER_STATUS, DEFAULT_TASK_STATUS, PillarStatus

if TYPE_CHECKING:
    from app.db.models import User


class Matter(Base):
    """
    One property settlement transaction.

    Exactly one client owns a matter. Conveyancer and broker are optional
    assignments. Progress lives in the five pillar columns.
    """

    __tablename__ = "matters"
    __table_args__ = (
        Index("idx_matters_client", "client_user_id"),
        Index("idx_matters_conveyancer", "conveyancer_user_id"),
        Index("idx_matters_broker", "broker_user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    client_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    conveyancer_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    broker_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    # Back-reference to the originating referral (referrals.matter_id holds the FK)
    referral_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)

    status: Mapped[str] = mapped_column(
        String(50), default=DEFAULT_MATTER_STATUS.value, nullable=False
    )
    transaction_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Five pillars
    pillar_pre_settlement: Mapped[str] = mapped_column(
        String(20), default=PillarStatus.NOT_STARTED.value, nullable=False
    )
    pillar_exchange: Mapped[str] = mapped_column(
        String(20), default=PillarStatus.NOT_STARTED.value, nullable=False
    )
    pillar_conditions: Mapped[str] = mapped_column(
        String(20), default=PillarStatus.NOT_STARTED.value, nullable=False
    )
    pillar_pre_completion: Mapped[str] = mapped_column(
        String(20), default=PillarStatus.NOT_STARTED.value, nullable=False
    )
    pillar_settlement: Mapped[str] = mapped_column(
        String(20), default=PillarStatus.NOT_STARTED.value, nullable=False
    )

    # Key dates
    settlement_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    cooling_off_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    finance_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Money (integer cents)
    contract_price_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deposit_amount_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deposit_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # External correlation ids
    smokeball_matter_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pexa_workspace_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    last_active_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    client: Mapped["User"] = relationship(foreign_keys=[client_user_id])
    tasks: Mapped[list["Task"]] = relationship(
        back_populates="matter", cascade="all, delete-orphan"
    )
    documents: Mapped[list["Document"]] = relationship(
        back_populates="matter", cascade="all, delete-orphan"
    )


class Task(Base):
    """A unit of work on a matter. Independent of the pillars."""

    __tablename__ = "tasks"
    __table_args__ = (Index("idx_tasks_matter_status", "matter_id", "status"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    matter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("matters.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_TASK_STATUS.value, nullable=False
    )
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    pillar: Mapped[str | None] = mapped_column(String(50), nullable=True)
    assigned_to_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    matter: Mapped["Matter"] = relationship(back_populates="tasks")


class Document(Base):
    """
    A file record in a matter's vault.

    Binary content lives in external storage; only the key/url is kept.
    Locked documents cannot be deleted.
    """

    __tablename__ = "documents"
    __table_args__ = (Index("idx_documents_matter", "matter_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    matter_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("matters.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    size_label: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    uploaded_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    file_key: Mapped[str | None] = mapped_column(String(500), unique=True, nullable=True)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    matter: Mapped["Matter"] = relationship(back_populates="documents")
