"""Two-factor router - phone one-time codes."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.core.errors import DependencyUnavailable
from app.core.rate_limit import AUTH_LIMIT, limiter
from app.db.models import User
from app.schemas.two_factor import (
    TwoFactorSendResult,
    TwoFactorSetup,
    TwoFactorStatus,
    TwoFactorVerify,
)
from app.services import otp_service, twilio_sms_service

router = APIRouter()


def _status(user: User) -> TwoFactorStatus:
    return TwoFactorStatus(
        enabled=user.two_factor_enabled,
        phone=otp_service.mask_phone(user.phone),
        verified_at=user.two_factor_verified_at,
    )


@router.get("/status", response_model=TwoFactorStatus)
def get_status(user: User = Depends(get_current_user)):
    return _status(user)


@router.post("/setup", response_model=TwoFactorStatus)
def setup(
    data: TwoFactorSetup,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _status(otp_service.setup_phone(db, user, data.phone))


@router.post("/send", response_model=TwoFactorSendResult)
@limiter.limit(AUTH_LIMIT)
async def send_code(
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Text a fresh 6-digit code to the configured phone."""
    if not twilio_sms_service.is_configured():
        raise DependencyUnavailable("SMS service not configured")
    code, expires_at = otp_service.issue_code(db, user)
    await twilio_sms_service.send_verification_code(user.phone, code)
    return TwoFactorSendResult(sent=True, expires_at=expires_at)


@router.post("/verify", response_model=TwoFactorStatus)
@limiter.limit(AUTH_LIMIT)
def verify_code(
    request: Request,
    data: TwoFactorVerify,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _status(otp_service.verify_code(db, user, data.code))
