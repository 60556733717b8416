"""SQLAlchemy ORM models, re-exported so Base.metadata sees every table."""

from app.db.models.auth import OtpCode, User
from app.db.models.matters import Document, Matter, Task
from app.db.models.notifications import NotificationLog, NotificationTemplate
from app.db.models.organisations import Organisation, OrganisationMember
from app.db.models.playbook import PlaybookArticle
from app.db.models.referrals import Payment, Referral

__all__ = [
    "Document",
    "Matter",
    "NotificationLog",
    "NotificationTemplate",
    "Organisation",
    "OrganisationMember",
    "OtpCode",
    "Payment",
    "PlaybookArticle",
    "Referral",
    "Task",
    "User",
]
