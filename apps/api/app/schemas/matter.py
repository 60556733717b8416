"""Pydantic schemas for matters and pillar progress."""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from app.db.enums import Pillar, PillarStatus
from app.schemas.base import CamelModel


class MatterCreate(CamelModel):
    """Request to create a matter. Clients create matters for themselves."""
    address: str = Field(..., min_length=1, max_length=500)
    client_user_id: UUID | None = None
    conveyancer_user_id: UUID | None = None
    broker_user_id: UUID | None = None
    status: str | None = Field(None, max_length=50)
    transaction_type: str | None = Field(None, max_length=50)
    settlement_date: date | None = None
    cooling_off_date: date | None = None
    finance_date: date | None = None
    contract_price_cents: int | None = Field(None, ge=0)
    deposit_amount_cents: int | None = Field(None, ge=0)
    deposit_paid: bool = False
    smokeball_matter_id: str | None = Field(None, max_length=100)
    pexa_workspace_id: str | None = Field(None, max_length=100)


class MatterUpdate(CamelModel):
    """Request to update a matter (partial). Pillars included."""
    address: str | None = Field(None, min_length=1, max_length=500)
    conveyancer_user_id: UUID | None = None
    broker_user_id: UUID | None = None
    status: str | None = Field(None, max_length=50)
    transaction_type: str | None = Field(None, max_length=50)
    pillar_pre_settlement: PillarStatus | None = None
    pillar_exchange: PillarStatus | None = None
    pillar_conditions: PillarStatus | None = None
    pillar_pre_completion: PillarStatus | None = None
    pillar_settlement: PillarStatus | None = None
    settlement_date: date | None = None
    cooling_off_date: date | None = None
    finance_date: date | None = None
    contract_price_cents: int | None = Field(None, ge=0)
    deposit_amount_cents: int | None = Field(None, ge=0)
    deposit_paid: bool | None = None
    smokeball_matter_id: str | None = Field(None, max_length=100)
    pexa_workspace_id: str | None = Field(None, max_length=100)


class PillarUpdate(CamelModel):
    status: PillarStatus


class PillarStateRead(CamelModel):
    key: Pillar
    label: str
    status: PillarStatus


class PillarProgressRead(CamelModel):
    completed_count: int
    overall_percent: int
    current_pillar: Pillar | None = None
    pillars: list[PillarStateRead]


class MatterRead(CamelModel):
    """Full matter response with derived progress."""
    id: UUID
    address: str
    client_user_id: UUID
    conveyancer_user_id: UUID | None
    broker_user_id: UUID | None
    referral_id: UUID | None
    status: str
    transaction_type: str | None
    pillar_pre_settlement: PillarStatus
    pillar_exchange: PillarStatus
    pillar_conditions: PillarStatus
    pillar_pre_completion: PillarStatus
    pillar_settlement: PillarStatus
    settlement_date: date | None
    cooling_off_date: date | None
    finance_date: date | None
    contract_price_cents: int | None
    deposit_amount_cents: int | None
    deposit_paid: bool
    smokeball_matter_id: str | None
    pexa_workspace_id: str | None
    last_active_at: datetime | None
    created_at: datetime
    updated_at: datetime
    progress: PillarProgressRead
