"""Verification of identity (VOI) state on the user record."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import Forbidden
from app.db.enums import VoiStatus
from app.db.models import User
from app.services import didit_service

logger = logging.getLogger(__name__)


def mark_pending(db: Session, user: User, session_id: str) -> User:
    user.voi_status = VoiStatus.PENDING.value
    user.voi_session_id = session_id
    db.commit()
    db.refresh(user)
    return user


def check_session_owner(user: User, session_id: str) -> None:
    if not user.voi_session_id or user.voi_session_id != session_id:
        raise Forbidden("Verification session does not belong to you")


def apply_webhook(db: Session, payload: dict) -> User | None:
    """
    Apply a vendor decision. vendor_data carries our user id.

    Unknown users and undecided statuses are acknowledged without changes.
    """
    vendor_data = payload.get("vendor_data")
    status = didit_service.decision_to_status(payload.get("status"))
    if not vendor_data or status is None:
        return None

    try:
        user_id = UUID(str(vendor_data))
    except ValueError:
        logger.warning("Verification webhook with malformed vendor_data")
        return None

    user = db.get(User, user_id)
    if not user:
        logger.warning("Verification webhook for unknown user %s", user_id)
        return None

    session_id = payload.get("session_id")
    if session_id and user.voi_session_id and session_id != user.voi_session_id:
        logger.warning("Verification webhook session mismatch for user %s", user.id)
        return None

    user.voi_status = status.value
    db.commit()
    db.refresh(user)
    logger.info("VOI status for user %s set to %s", user.id, status.value)
    return user
