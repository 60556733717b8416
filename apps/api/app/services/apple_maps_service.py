"""Apple Maps (MapKit JS) token issuance.

Tokens are ES256 JWTs minted locally and cached per process until shortly
before expiry.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import settings
from app.core.errors import DependencyUnavailable

TOKEN_TTL_SECONDS = 3600
REFRESH_MARGIN_SECONDS = 60

_lock = threading.Lock()
_cached_token: str | None = None
_cached_expires_at: datetime | None = None


def is_configured() -> bool:
    return bool(
        settings.APPLE_MAPS_TEAM_ID
        and settings.APPLE_MAPS_KEY_ID
        and settings.APPLE_MAPS_PRIVATE_KEY
    )


def _private_key() -> str:
    # Env files usually hold the PEM on one line with literal \n
    return settings.APPLE_MAPS_PRIVATE_KEY.replace("\\n", "\n")


def _mint(now: datetime) -> tuple[str, datetime]:
    expires_at = now + timedelta(seconds=TOKEN_TTL_SECONDS)
    token = jwt.encode(
        {
            "iss": settings.APPLE_MAPS_TEAM_ID,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        },
        _private_key(),
        algorithm="ES256",
        headers={"kid": settings.APPLE_MAPS_KEY_ID},
    )
    return token, expires_at


def get_token(now: datetime | None = None) -> tuple[str, datetime]:
    """Return (token, expires_at), minting a new one when the cache is stale."""
    global _cached_token, _cached_expires_at

    if not is_configured():
        raise DependencyUnavailable("Maps service not configured")

    now = now or datetime.now(timezone.utc)
    with _lock:
        if (
            _cached_token
            and _cached_expires_at
            and _cached_expires_at - now > timedelta(seconds=REFRESH_MARGIN_SECONDS)
        ):
            return _cached_token, _cached_expires_at
        _cached_token, _cached_expires_at = _mint(now)
        return _cached_token, _cached_expires_at


def clear_cache() -> None:
    global _cached_token, _cached_expires_at
    with _lock:
        _cached_token = None
        _cached_expires_at = None
