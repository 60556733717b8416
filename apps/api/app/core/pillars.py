"""
Five-pillar settlement progress.

Each matter tracks five stages independently. Progress is derived, never
stored. Ordering is not enforced unless PILLAR_ENFORCE_ORDER is set.
"""

from dataclasses import dataclass

from app.core.errors import ValidationError
from app.db.enums import Pillar, PillarStatus
from app.db.models import Matter


@dataclass(frozen=True)
class PillarDef:
    key: Pillar
    column: str
    label: str


# Fixed order
PILLARS: tuple[PillarDef, ...] = (
    PillarDef(Pillar.PRE_SETTLEMENT, "pillar_pre_settlement", "Pre-Settlement"),
    PillarDef(Pillar.EXCHANGE, "pillar_exchange", "Exchange"),
    PillarDef(Pillar.CONDITIONS, "pillar_conditions", "Conditions"),
    PillarDef(Pillar.PRE_COMPLETION, "pillar_pre_completion", "Pre-Completion"),
    PillarDef(Pillar.SETTLEMENT, "pillar_settlement", "Settlement"),
)
PILLAR_COUNT = len(PILLARS)
_BY_KEY = {p.key: p for p in PILLARS}


@dataclass(frozen=True)
class PillarProgress:
    statuses: dict[Pillar, PillarStatus]
    completed_count: int
    overall_percent: int
    current_pillar: Pillar | None


def parse_pillar(value: str) -> Pillar:
    """Accept the API key (pillarExchange) or the column name (pillar_exchange)."""
    for pillar in PILLARS:
        if value in (pillar.key.value, pillar.column):
            return pillar.key
    raise ValidationError(f"Unknown pillar '{value}'", field="pillar")


def get_pillar_def(pillar: Pillar) -> PillarDef:
    return _BY_KEY[pillar]


def get_statuses(matter: Matter) -> dict[Pillar, PillarStatus]:
    return {p.key: PillarStatus(getattr(matter, p.column)) for p in PILLARS}


def compute_progress(statuses: dict[Pillar, PillarStatus]) -> PillarProgress:
    """Derive completed count, percent and the current (first in-progress) pillar."""
    completed = sum(1 for p in PILLARS if statuses[p.key] == PillarStatus.COMPLETE)
    current = next(
        (p.key for p in PILLARS if statuses[p.key] == PillarStatus.IN_PROGRESS),
        None,
    )
    return PillarProgress(
        statuses=dict(statuses),
        completed_count=completed,
        overall_percent=round(completed / PILLAR_COUNT * 100),
        current_pillar=current,
    )


def matter_progress(matter: Matter) -> PillarProgress:
    return compute_progress(get_statuses(matter))


def validate_order(
    statuses: dict[Pillar, PillarStatus], pillar: Pillar, status: PillarStatus
) -> None:
    """Strict mode: a pillar may only start once every earlier pillar is complete."""
    if status == PillarStatus.NOT_STARTED:
        return
    for p in PILLARS:
        if p.key == pillar:
            return
        if statuses[p.key] != PillarStatus.COMPLETE:
            raise ValidationError(
                f"{get_pillar_def(pillar).label} cannot start before {p.label} is complete",
                field="status",
            )


def set_pillar(
    matter: Matter,
    pillar: Pillar,
    status: PillarStatus,
    *,
    enforce_order: bool = False,
) -> PillarStatus:
    """
    Write one pillar; no other pillar is touched.

    Returns the previous status so callers can detect transitions.
    """
    statuses = get_statuses(matter)
    if enforce_order:
        validate_order(statuses, pillar, status)
    column = get_pillar_def(pillar).column
    previous = statuses[pillar]
    setattr(matter, column, status.value)
    return previous
