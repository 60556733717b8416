"""Security utilities: identity bearer tokens, QR tokens and OTP codes."""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import settings

IDENTITY_ALGORITHM = "HS256"
OTP_DIGITS = 6


# =============================================================================
# Identity bearer tokens
# =============================================================================

def create_identity_token(
    subject: str,
    email: str,
    full_name: str | None = None,
    expires_hours: int | None = None,
) -> str:
    """
    Mint a bearer token in the identity provider's shape.

    Used by demo login and tests. Always signs with the current secret.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "email": email,
        "aud": settings.IDENTITY_JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(hours=expires_hours or settings.JWT_EXPIRES_HOURS),
        "user_metadata": {"full_name": full_name} if full_name else {},
    }
    return jwt.encode(payload, settings.IDENTITY_JWT_SECRET, algorithm=IDENTITY_ALGORITHM)


def decode_identity_token(token: str) -> dict:
    """
    Decode and verify an identity bearer token.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.identity_jwt_secrets:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[IDENTITY_ALGORITHM],
                audience=settings.IDENTITY_JWT_AUDIENCE,
                options={"require": ["exp", "sub"]},
            )
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


# =============================================================================
# Opaque tokens and one-time codes
# =============================================================================

def generate_qr_token() -> str:
    """Random URL-safe token for public referral landing pages."""
    return secrets.token_urlsafe(16)


def generate_otp_code() -> str:
    return f"{secrets.randbelow(10**OTP_DIGITS):0{OTP_DIGITS}d}"


def hash_otp_code(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def verify_otp_code(code: str, code_hash: str) -> bool:
    return hmac.compare_digest(hash_otp_code(code), code_hash)
