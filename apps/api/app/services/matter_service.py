"""Matter service - CRUD, pillar progress and external sync."""

import logging
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Forbidden, ValidationError
from app.core.matter_access import check_matter_editor, matter_visibility_clause
from app.core.pillars import (
    PILLARS,
    PillarProgress,
    get_pillar_def,
    matter_progress,
    set_pillar,
)
from app.db.enums import MatterStatus, NotificationTrigger, Pillar, PillarStatus, Role
from app.db.models import Matter, User
from app.schemas.matter import (
    MatterCreate,
    MatterRead,
    MatterUpdate,
    PillarProgressRead,
    PillarStateRead,
)
from app.services import user_service

logger = logging.getLogger(__name__)

PILLAR_FIELDS = {p.column: p.key for p in PILLARS}

# Assignment column -> (request field, role the assigned user must hold)
ASSIGNMENT_FIELDS = {
    "conveyancer_user_id": ("conveyancerUserId", (Role.CONVEYANCER,)),
    "broker_user_id": ("brokerUserId", (Role.BROKER,)),
}


def list_matters(db: Session, user: User) -> list[Matter]:
    """Role-filtered matter list, newest first."""
    return (
        db.query(Matter)
        .filter(matter_visibility_clause(user))
        .order_by(Matter.created_at.desc())
        .all()
    )


def get_matter(db: Session, matter_id: UUID) -> Matter | None:
    return db.get(Matter, matter_id)


def create_matter(db: Session, user: User, data: MatterCreate) -> Matter:
    """
    Create a matter.

    Clients always own what they create. Other roles must name the client
    and default themselves into their own assignment slot.
    """
    if user.role == Role.CLIENT.value:
        if data.client_user_id and data.client_user_id != user.id:
            raise Forbidden("Clients can only create their own matters")
        client_id = user.id
    else:
        if not data.client_user_id:
            raise ValidationError("clientUserId: Field required", field="clientUserId")
        client_id = data.client_user_id
    client = user_service.require_user(db, client_id)
    for column in ASSIGNMENT_FIELDS:
        _check_assignment(db, column, getattr(data, column))

    conveyancer_id = data.conveyancer_user_id
    if conveyancer_id is None and user.role == Role.CONVEYANCER.value:
        conveyancer_id = user.id
    broker_id = data.broker_user_id
    if broker_id is None and user.role == Role.BROKER.value:
        broker_id = user.id

    matter = Matter(
        address=data.address,
        client_user_id=client.id,
        conveyancer_user_id=conveyancer_id,
        broker_user_id=broker_id,
        status=data.status or MatterStatus.DRAFT.value,
        transaction_type=data.transaction_type,
        settlement_date=data.settlement_date,
        cooling_off_date=data.cooling_off_date,
        finance_date=data.finance_date,
        contract_price_cents=data.contract_price_cents,
        deposit_amount_cents=data.deposit_amount_cents,
        deposit_paid=data.deposit_paid,
        smokeball_matter_id=data.smokeball_matter_id,
        pexa_workspace_id=data.pexa_workspace_id,
        last_active_at=datetime.now(timezone.utc),
    )
    db.add(matter)
    db.commit()
    db.refresh(matter)
    logger.info("Matter %s created by %s", matter.id, user.id)

    from app.services import notification_service

    notification_service.notify(
        db, NotificationTrigger.MATTER_CREATED, recipient=client, matter=matter
    )
    if matter.settlement_date:
        notification_service.notify(
            db, NotificationTrigger.SETTLEMENT_DATE_SET, recipient=client, matter=matter
        )
    return matter


def _check_assignment(db: Session, column: str, user_id: UUID | None) -> None:
    if user_id is None:
        return
    field, roles = ASSIGNMENT_FIELDS[column]
    user_service.require_assignee(db, user_id, field, roles)


def _ensure_not_settled(matter: Matter) -> None:
    if matter.status == MatterStatus.SETTLED.value:
        raise ValidationError("Settled matters cannot be modified", field="status")


def _fire_pillar_milestones(
    db: Session, matter: Matter, completed: list[Pillar]
) -> None:
    if not completed:
        return
    from app.services import notification_service

    client = user_service.get_user_by_id(db, matter.client_user_id)
    if not client:
        return
    for pillar in completed:
        notification_service.notify(
            db,
            NotificationTrigger.MILESTONE_REACHED,
            recipient=client,
            matter=matter,
            extra={"pillar": get_pillar_def(pillar).label},
        )


def update_matter(db: Session, user: User, matter: Matter, data: MatterUpdate) -> Matter:
    """
    Partial update. Only explicitly provided fields are written.

    Pillar fields go through the same rules as set_matter_pillar.
    """
    check_matter_editor(matter, user)
    _ensure_not_settled(matter)

    update_data = data.model_dump(exclude_unset=True)
    for column in ASSIGNMENT_FIELDS.keys() & update_data.keys():
        _check_assignment(db, column, update_data[column])
    previous_settlement = matter.settlement_date
    completed: list[Pillar] = []

    for field, value in update_data.items():
        if field in PILLAR_FIELDS:
            if value is None:
                continue
            pillar = PILLAR_FIELDS[field]
            previous = set_pillar(
                matter, pillar, value, enforce_order=settings.PILLAR_ENFORCE_ORDER
            )
            if value == PillarStatus.COMPLETE and previous != PillarStatus.COMPLETE:
                completed.append(pillar)
            continue
        if field in ("address", "status", "deposit_paid") and value is None:
            continue
        setattr(matter, field, value)

    matter.last_active_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(matter)

    _fire_pillar_milestones(db, matter, completed)
    if matter.settlement_date and matter.settlement_date != previous_settlement:
        from app.services import notification_service

        client = user_service.get_user_by_id(db, matter.client_user_id)
        if client:
            notification_service.notify(
                db, NotificationTrigger.SETTLEMENT_DATE_SET, recipient=client, matter=matter
            )
    return matter


def set_matter_pillar(
    db: Session,
    user: User,
    matter: Matter,
    pillar: Pillar,
    status: PillarStatus,
) -> Matter:
    """Advance (or correct) one pillar. No other pillar is touched."""
    check_matter_editor(matter, user)
    _ensure_not_settled(matter)

    previous = set_pillar(matter, pillar, status, enforce_order=settings.PILLAR_ENFORCE_ORDER)
    matter.last_active_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(matter)

    if status == PillarStatus.COMPLETE and previous != PillarStatus.COMPLETE:
        _fire_pillar_milestones(db, matter, [pillar])
    return matter


def apply_smokeball_sync(db: Session, user: User, matter: Matter, remote: dict) -> Matter:
    """Copy key dates from a Smokeball matter summary onto the local matter."""
    check_matter_editor(matter, user)
    _ensure_not_settled(matter)

    for remote_key, field in (
        ("settlementDate", "settlement_date"),
        ("coolingOffDate", "cooling_off_date"),
        ("financeDate", "finance_date"),
    ):
        value = remote.get(remote_key)
        if value:
            setattr(matter, field, date.fromisoformat(value[:10]))
    matter.last_active_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(matter)
    return matter


# =============================================================================
# Read models
# =============================================================================

def to_progress_read(progress: PillarProgress) -> PillarProgressRead:
    return PillarProgressRead(
        completed_count=progress.completed_count,
        overall_percent=progress.overall_percent,
        current_pillar=progress.current_pillar,
        pillars=[
            PillarStateRead(key=p.key, label=p.label, status=progress.statuses[p.key])
            for p in PILLARS
        ],
    )


def to_matter_read(matter: Matter) -> MatterRead:
    data = {
        name: getattr(matter, name)
        for name in MatterRead.model_fields
        if name != "progress"
    }
    data["progress"] = to_progress_read(matter_progress(matter))
    return MatterRead.model_validate(data)
