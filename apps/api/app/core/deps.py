"""FastAPI dependencies for authentication, authorization, and database access."""

import logging
from typing import Generator

import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, Unauthorized
from app.core.security import decode_identity_token
from app.db.enums import Role
from app.db.models import User
from app.db.session import SessionLocal

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the caller from the bearer token.

    Validates signature, audience and expiry, then provisions the local
    user on first sight (idempotent on the token subject).

    Raises:
        Unauthorized: Missing, malformed, expired or badly signed token
    """
    from app.services import user_service

    token = _bearer_token(request)
    if not token:
        raise Unauthorized("Not authenticated")

    try:
        claims = decode_identity_token(token)
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Session expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")

    email = claims.get("email")
    if not email:
        raise Unauthorized("Token has no email claim")

    metadata = claims.get("user_metadata") or {}
    user = user_service.provision_user(
        db,
        external_id=claims["sub"],
        email=email,
        display_name=metadata.get("full_name") or metadata.get("name"),
    )
    request.state.user_id = str(user.id)
    return user


def require_roles(allowed_roles: list):
    """
    Dependency factory for role-based authorization.

    Uses enum values (not strings) to prevent drift.

    Usage:
        @router.post("/admin", dependencies=[Depends(require_roles([Role.ADMIN]))])
    """
    def dependency(user: User = Depends(get_current_user)) -> User:
        if not Role.has_value(user.role) or Role(user.role) not in allowed_roles:
            raise Forbidden(f"Role '{user.role}' not authorized for this action")
        return user
    return dependency
