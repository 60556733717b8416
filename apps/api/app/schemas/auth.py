"""Pydantic schemas for the current user, profile and onboarding."""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.db.enums import Role, VoiStatus
from app.schemas.base import CamelModel, StrictCamelModel


class UserRead(CamelModel):
    """Caller-visible profile. Provider ids and secrets are never returned."""
    id: UUID
    email: str
    display_name: str
    role: Role
    avatar_url: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    address: str | None = None
    state: str | None = None
    postcode: str | None = None
    onboarding_step: int
    onboarding_complete: bool
    voi_method: str | None = None
    voi_status: VoiStatus
    two_factor_enabled: bool
    created_at: datetime


class UserSummary(CamelModel):
    id: UUID
    display_name: str
    email: str
    role: Role


class ProfileUpdate(StrictCamelModel):
    """Profile edits. Role may only be chosen during onboarding and never ADMIN."""
    display_name: str | None = Field(None, min_length=1, max_length=255)
    avatar_url: str | None = Field(None, max_length=500)
    role: Role | None = None


class OnboardingUpdate(StrictCamelModel):
    """Onboarding wizard fields. Anything else in the body is rejected."""
    phone: str | None = Field(None, max_length=50)
    date_of_birth: date | None = None
    address: str | None = Field(None, max_length=500)
    state: str | None = Field(None, max_length=10)
    postcode: str | None = Field(None, max_length=10)
    voi_method: str | None = Field(None, max_length=50)
    voi_status: VoiStatus | None = None
    onboarding_step: int | None = Field(None, ge=0)
    onboarding_complete: bool | None = None


class DemoLoginRequest(CamelModel):
    email: EmailStr


class DemoLoginResponse(CamelModel):
    token: str
    user: UserRead
