"""Pydantic schemas for phone two-factor."""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class TwoFactorStatus(CamelModel):
    enabled: bool
    phone: str | None = None  # Masked
    verified_at: datetime | None = None


class TwoFactorSetup(CamelModel):
    phone: str = Field(..., min_length=6, max_length=50)


class TwoFactorSendResult(CamelModel):
    sent: bool
    expires_at: datetime


class TwoFactorVerify(CamelModel):
    code: str = Field(..., pattern=r"^\d{6}$")
