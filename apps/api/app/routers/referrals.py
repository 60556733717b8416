"""Referrals router - broker pipeline and the public QR landing lookup."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db, require_roles
from app.core.rate_limit import PUBLIC_LIMIT, limiter
from app.db.enums import Role
from app.db.models import User
from app.schemas.matter import MatterRead
from app.schemas.referral import (
    QrBrokerInfo,
    QrLandingRead,
    QrReferralInfo,
    ReferralConvert,
    ReferralCreate,
    ReferralRead,
    ReferralUpdate,
)
from app.services import matter_service, referral_service

router = APIRouter()

REFERRAL_WRITERS = [Role.BROKER, Role.ADMIN]


@router.get("", response_model=list[ReferralRead])
def list_referrals(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """BROKER sees own referrals; CONVEYANCER and ADMIN see all; CLIENT gets 403."""
    return referral_service.list_referrals(db, user)


@router.post("", response_model=ReferralRead, status_code=201)
def create_referral(
    data: ReferralCreate,
    user: User = Depends(require_roles(REFERRAL_WRITERS)),
    db: Session = Depends(get_db),
):
    return referral_service.create_referral(db, user, data)


@router.get("/qr/{token}", response_model=QrLandingRead)
@limiter.limit(PUBLIC_LIMIT)
def get_qr_referral(
    request: Request,
    token: str,
    db: Session = Depends(get_db),
):
    """Public landing-page lookup. No authentication; contact details withheld."""
    referral, broker = referral_service.get_public_referral(db, token)
    return QrLandingRead(
        referral=QrReferralInfo.model_validate(referral),
        broker=QrBrokerInfo(name=broker.display_name, email=broker.email) if broker else None,
    )


@router.get("/{referral_id}", response_model=ReferralRead)
def get_referral(
    referral_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return referral_service.get_visible_referral(db, user, referral_id)


@router.patch("/{referral_id}", response_model=ReferralRead)
def update_referral(
    referral_id: UUID,
    data: ReferralUpdate,
    user: User = Depends(require_roles(REFERRAL_WRITERS)),
    db: Session = Depends(get_db),
):
    referral = referral_service.get_visible_referral(db, user, referral_id)
    return referral_service.update_referral(db, referral, data)


@router.post("/{referral_id}/qr", response_model=ReferralRead)
def issue_qr_token(
    referral_id: UUID,
    user: User = Depends(require_roles(REFERRAL_WRITERS)),
    db: Session = Depends(get_db),
):
    """Issue the QR token. Repeated calls return the same token."""
    referral = referral_service.get_visible_referral(db, user, referral_id)
    return referral_service.issue_qr_token(db, referral)


@router.post("/{referral_id}/convert", response_model=MatterRead, status_code=201)
def convert_referral(
    referral_id: UUID,
    data: ReferralConvert,
    user: User = Depends(require_roles([Role.BROKER, Role.CONVEYANCER, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    referral = referral_service.get_visible_referral(db, user, referral_id)
    matter = referral_service.convert_referral(db, user, referral, data)
    return matter_service.to_matter_read(matter)
