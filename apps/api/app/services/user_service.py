"""User provisioning, profile and onboarding."""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound, Unauthorized, ValidationError
from app.db.enums import Role, VoiStatus
from app.db.models import User
from app.schemas.auth import OnboardingUpdate, ProfileUpdate

logger = logging.getLogger(__name__)

# Columns that are NOT NULL on users; an explicit null leaves them unchanged
NON_CLEARABLE_ONBOARDING_FIELDS = ("voi_status", "onboarding_step", "onboarding_complete")


def get_user_by_id(db: Session, user_id: UUID) -> User | None:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_user_by_external_id(db: Session, external_id: str) -> User | None:
    return db.query(User).filter(User.external_id == external_id).first()


def require_user(db: Session, user_id: UUID) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def require_assignee(
    db: Session, user_id: UUID, field: str, roles: tuple[Role, ...] | None = None
) -> User:
    """Resolve a user id taken from a request body, reported against that field."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise ValidationError("User not found", field=field)
    if roles and user.role not in {r.value for r in roles}:
        allowed = ", ".join(r.value for r in roles)
        raise ValidationError(f"User must have role {allowed}", field=field)
    return user


def provision_user(
    db: Session,
    external_id: str,
    email: str,
    display_name: str | None = None,
) -> User:
    """
    Return the local user for an identity, creating it on first sight.

    Idempotent on external_id. A pre-existing row with the same email (seeded
    or invited) is linked rather than duplicated.
    """
    user = get_user_by_external_id(db, external_id)
    if user:
        return user

    email = email.strip().lower()
    user = get_user_by_email(db, email)
    if user:
        if user.external_id and user.external_id != external_id:
            raise Unauthorized("Account is linked to a different identity")
        user.external_id = external_id
        db.commit()
        db.refresh(user)
        return user

    user = User(
        external_id=external_id,
        email=email,
        display_name=display_name or email.split("@")[0],
        role=Role.CLIENT.value,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent first request for the same identity
        db.rollback()
        existing = get_user_by_external_id(db, external_id)
        if existing is None:
            raise
        return existing
    db.refresh(user)
    logger.info("Provisioned user %s", user.id)
    return user


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    """
    Update display name, avatar and (during onboarding only) role.

    ADMIN can never be self-assigned.
    """
    update_data = data.model_dump(exclude_unset=True)

    role = update_data.pop("role", None)
    if role is not None and role.value != user.role:
        if role == Role.ADMIN:
            raise Forbidden("Cannot assign the ADMIN role")
        if user.onboarding_complete:
            raise Forbidden("Role can only be chosen during onboarding")
        user.role = role.value

    for field, value in update_data.items():
        if value is None:
            continue
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


def update_onboarding(db: Session, user: User, data: OnboardingUpdate) -> User:
    """
    Apply onboarding wizard fields.

    A client-supplied "verified" identity status is ignored; only the
    verification webhook can mark a user verified.
    """
    update_data = data.model_dump(exclude_unset=True)
    for field in NON_CLEARABLE_ONBOARDING_FIELDS:
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    voi_status = update_data.get("voi_status")
    if voi_status == VoiStatus.VERIFIED:
        logger.info("Ignoring client-supplied verified status for user %s", user.id)
        update_data.pop("voi_status")
    elif voi_status is not None:
        update_data["voi_status"] = voi_status.value

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


def set_role(db: Session, user: User, role: Role) -> User:
    """Administrative role change (CLI)."""
    user.role = role.value
    db.commit()
    db.refresh(user)
    return user
