"""Enum definitions for application constants."""

from app.db.enums.auth import Role, VoiStatus
from app.db.enums.matters import (
    DEFAULT_MATTER_STATUS,
    DEFAULT_TASK_STATUS,
    MatterStatus,
    Pillar,
    PillarStatus,
    TaskStatus,
)
from app.db.enums.notifications import (
    DeliveryStatus,
    NotificationChannel,
    NotificationTrigger,
)
from app.db.enums.organisations import OrganisationRole
from app.db.enums.referrals import PaymentStatus, ReferralChannel, ReferralStatus

__all__ = [
    "DEFAULT_MATTER_STATUS",
    "DEFAULT_TASK_STATUS",
    "DeliveryStatus",
    "MatterStatus",
    "NotificationChannel",
    "NotificationTrigger",
    "OrganisationRole",
    "PaymentStatus",
    "Pillar",
    "PillarStatus",
    "ReferralChannel",
    "ReferralStatus",
    "Role",
    "TaskStatus",
    "VoiStatus",
]
