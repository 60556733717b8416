"""Referral service - broker pipeline, QR tokens and conversion to matters."""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ValidationError
from app.core.matter_access import check_referral_access, referral_visibility_clause
from app.core.security import generate_qr_token
from app.db.enums import MatterStatus, NotificationTrigger, ReferralChannel, ReferralStatus, Role
from app.db.models import Matter, Referral, User
from app.schemas.referral import ReferralConvert, ReferralCreate, ReferralUpdate
from app.services import user_service

logger = logging.getLogger(__name__)

QR_TOKEN_ATTEMPTS = 3


def list_referrals(db: Session, user: User) -> list[Referral]:
    return (
        db.query(Referral)
        .filter(referral_visibility_clause(user))
        .order_by(Referral.created_at.desc())
        .all()
    )


def get_visible_referral(db: Session, user: User, referral_id: UUID) -> Referral:
    return check_referral_access(db.get(Referral, referral_id), user)


def create_referral(db: Session, user: User, data: ReferralCreate) -> Referral:
    """Create a referral owned by the caller. QR referrals get a token immediately."""
    referral = Referral(
        broker_user_id=user.id,
        client_name=data.client_name,
        client_email=data.client_email,
        client_phone=data.client_phone,
        property_address=data.property_address,
        transaction_type=data.transaction_type,
        notes=data.notes,
        channel=data.channel.value,
        status=ReferralStatus.PENDING.value,
        commission_cents=data.commission_cents,
    )
    db.add(referral)
    db.commit()
    db.refresh(referral)

    if data.channel == ReferralChannel.QR:
        referral = issue_qr_token(db, referral)

    from app.services import notification_service

    notification_service.notify(
        db,
        NotificationTrigger.REFERRAL_CREATED,
        recipient=user,
        extra={"referral_client_name": referral.client_name},
    )
    return referral


def update_referral(db: Session, referral: Referral, data: ReferralUpdate) -> Referral:
    """
    Partial update by field overwrite.

    The schema has no qr_token field, so an issued token is never reassigned.
    """
    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("client_name", "status"):
            continue
        if field == "status":
            value = value.value
        setattr(referral, field, value)
    db.commit()
    db.refresh(referral)
    return referral


def issue_qr_token(db: Session, referral: Referral) -> Referral:
    """Issue a unique token. Idempotent: an existing token is kept."""
    if referral.qr_token:
        return referral

    for attempt in range(QR_TOKEN_ATTEMPTS):
        referral.qr_token = generate_qr_token()
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("QR token collision for referral %s (attempt %d)", referral.id, attempt + 1)
            continue
        db.refresh(referral)
        return referral
    raise RuntimeError("Could not issue a unique QR token")


def get_public_referral(db: Session, token: str) -> tuple[Referral, User | None]:
    """Resolve a QR token for the public landing page."""
    referral = db.query(Referral).filter(Referral.qr_token == token).first()
    if not referral:
        raise NotFound("Referral not found")
    broker = db.get(User, referral.broker_user_id)
    return referral, broker


def convert_referral(
    db: Session, user: User, referral: Referral, data: ReferralConvert
) -> Matter:
    """Open a matter for the referred client and mark the referral Converted."""
    if referral.matter_id:
        raise ValidationError("Referral has already been converted", field="status")

    address = data.address or referral.property_address
    if not address:
        raise ValidationError("address: Field required", field="address")
    client = user_service.get_user_by_id(db, data.client_user_id)
    if not client:
        raise ValidationError("Client user not found", field="clientUserId")
    if data.conveyancer_user_id:
        user_service.require_assignee(
            db, data.conveyancer_user_id, "conveyancerUserId", (Role.CONVEYANCER,)
        )

    matter = Matter(
        address=address,
        client_user_id=client.id,
        conveyancer_user_id=data.conveyancer_user_id,
        broker_user_id=referral.broker_user_id,
        referral_id=referral.id,
        status=MatterStatus.DRAFT.value,
        transaction_type=referral.transaction_type,
        settlement_date=data.settlement_date,
    )
    db.add(matter)
    db.flush()

    referral.matter_id = matter.id
    referral.status = ReferralStatus.CONVERTED.value
    db.commit()
    db.refresh(matter)
    logger.info("Referral %s converted to matter %s by %s", referral.id, matter.id, user.id)

    from app.services import notification_service

    notification_service.notify(
        db, NotificationTrigger.MATTER_CREATED, recipient=client, matter=matter
    )
    return matter
