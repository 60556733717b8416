"""Phone one-time codes for the second factor."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ValidationError
from app.core.security import generate_otp_code, hash_otp_code, verify_otp_code
from app.db.models import OtpCode, User

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def mask_phone(phone: str | None) -> str | None:
    if not phone:
        return None
    digits = phone.replace(" ", "")
    return f"{'*' * max(len(digits) - 3, 0)}{digits[-3:]}"


def setup_phone(db: Session, user: User, phone: str) -> User:
    """Store the phone used for codes. Changing it requires re-verification."""
    phone = phone.strip()
    if phone != user.phone:
        user.phone = phone
        user.two_factor_enabled = False
        user.two_factor_verified_at = None
    db.commit()
    db.refresh(user)
    return user


def issue_code(db: Session, user: User) -> tuple[str, datetime]:
    """
    Create a fresh code, replacing any outstanding unverified ones.

    Returns the plain code (to send) and its expiry. Only the hash is stored.
    """
    if not user.phone:
        raise ValidationError("Set up a phone number first", field="phone")

    db.query(OtpCode).filter(
        OtpCode.user_id == user.id, OtpCode.verified.is_(False)
    ).delete(synchronize_session=False)

    code = generate_otp_code()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.OTP_TTL_MINUTES)
    db.add(OtpCode(user_id=user.id, code_hash=hash_otp_code(code), expires_at=expires_at))
    db.commit()
    return code, expires_at


def verify_code(db: Session, user: User, code: str) -> User:
    """Check the latest outstanding code. Success enables two-factor."""
    otp = (
        db.query(OtpCode)
        .filter(OtpCode.user_id == user.id, OtpCode.verified.is_(False))
        .order_by(OtpCode.created_at.desc())
        .first()
    )
    if not otp:
        raise ValidationError("No active verification code", field="code")
    if _as_utc(otp.expires_at) < datetime.now(timezone.utc):
        raise ValidationError("Verification code has expired", field="code")
    if otp.attempts >= settings.OTP_MAX_ATTEMPTS:
        raise ValidationError("Too many attempts, request a new code", field="code")

    otp.attempts += 1
    if not verify_otp_code(code, otp.code_hash):
        db.commit()
        raise ValidationError("Invalid verification code", field="code")

    otp.verified = True
    user.two_factor_enabled = True
    user.two_factor_verified_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info("Two-factor enabled for user %s", user.id)
    return user
