"""Commission payment service."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFound
from app.db.enums import PaymentStatus, Role
from app.db.models import Payment, Referral, User


def calculate_split(gross_cents: int, fee_percent: float | None = None) -> tuple[int, int]:
    """Return (platform_fee_cents, net_amount_cents). Fee rounds to the nearest cent."""
    percent = settings.PLATFORM_FEE_PERCENT if fee_percent is None else fee_percent
    fee = int(round(gross_cents * percent / 100))
    return fee, gross_cents - fee


def list_payments(db: Session, user: User) -> list[Payment]:
    query = db.query(Payment)
    if user.role == Role.BROKER.value:
        query = query.filter(Payment.broker_user_id == user.id)
    return query.order_by(Payment.created_at.desc()).all()


def get_payment(db: Session, payment_id: UUID) -> Payment:
    payment = db.get(Payment, payment_id)
    if not payment:
        raise NotFound("Payment not found")
    return payment


def create_payment(db: Session, referral_id: UUID, gross_amount_cents: int) -> Payment:
    """Create a pending payout for the referral's broker."""
    referral = db.get(Referral, referral_id)
    if not referral:
        raise NotFound("Referral not found")

    fee, net = calculate_split(gross_amount_cents)
    payment = Payment(
        referral_id=referral.id,
        matter_id=referral.matter_id,
        broker_user_id=referral.broker_user_id,
        gross_amount_cents=gross_amount_cents,
        platform_fee_cents=fee,
        net_amount_cents=net,
        status=PaymentStatus.PENDING.value,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment


def update_payment_status(db: Session, payment: Payment, status: PaymentStatus) -> Payment:
    payment.status = status.value
    if status == PaymentStatus.SETTLED and payment.settled_at is None:
        payment.settled_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(payment)
    return payment
