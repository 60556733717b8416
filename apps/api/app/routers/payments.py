"""Payments router - broker commission payouts."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles
from app.db.enums import Role
from app.db.models import User
from app.schemas.payment import PaymentCreate, PaymentRead, PaymentUpdate
from app.services import payment_service

router = APIRouter()


@router.get("", response_model=list[PaymentRead])
def list_payments(
    user: User = Depends(require_roles([Role.BROKER, Role.ADMIN])),
    db: Session = Depends(get_db),
):
    """Brokers see their own payouts, admins see all."""
    return payment_service.list_payments(db, user)


@router.post("", response_model=PaymentRead, status_code=201)
def create_payment(
    data: PaymentCreate,
    user: User = Depends(require_roles([Role.ADMIN])),
    db: Session = Depends(get_db),
):
    return payment_service.create_payment(db, data.referral_id, data.gross_amount_cents)


@router.patch("/{payment_id}", response_model=PaymentRead)
def update_payment(
    payment_id: UUID,
    data: PaymentUpdate,
    user: User = Depends(require_roles([Role.ADMIN])),
    db: Session = Depends(get_db),
):
    payment = payment_service.get_payment(db, payment_id)
    return payment_service.update_payment_status(db, payment, data.status)
