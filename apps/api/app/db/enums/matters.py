"""Matter, pillar and task enums."""

from enum import Enum


class PillarStatus(str, Enum):
    """Progress value held by each of the five pillars."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class Pillar(str, Enum):
    """The five settlement stages, declared in their fixed order."""

    PRE_SETTLEMENT = "pillarPreSettlement"
    EXCHANGE = "pillarExchange"
    CONDITIONS = "pillarConditions"
    PRE_COMPLETION = "pillarPreCompletion"
    SETTLEMENT = "pillarSettlement"


class MatterStatus(str, Enum):
    """Overall matter status. Stored as a free string; these are the known values."""

    DRAFT = "Draft"
    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    SETTLED = "Settled"  # Terminal


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    COMPLETE = "COMPLETE"


DEFAULT_MATTER_STATUS = MatterStatus.DRAFT
DEFAULT_TASK_STATUS = TaskStatus.PENDING
