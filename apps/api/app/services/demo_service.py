"""Demo accounts and idempotent seed data for evaluation environments."""

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFound, ValidationError
from app.core.security import create_identity_token
from app.db.enums import (
    MatterStatus,
    NotificationChannel,
    NotificationTrigger,
    Pillar,
    PillarStatus,
    ReferralChannel,
    ReferralStatus,
    Role,
    TaskStatus,
    VoiStatus,
)
from app.db.models import (
    Document,
    Matter,
    NotificationTemplate,
    PlaybookArticle,
    Referral,
    Task,
    User,
)
from app.services import user_service

logger = logging.getLogger(__name__)

DEMO_SUBJECT_PREFIX = "demo|"
DEMO_BUYER_EMAIL = "james@buyer.com.au"
DEMO_BROKER_EMAIL = "mike@broker.com.au"
DEMO_CONVEYANCER_EMAIL = "admin@legaleagles.com.au"


@dataclass(frozen=True)
class DemoAccount:
    email: str
    display_name: str
    role: Role
    profile: dict = field(default_factory=dict)


DEMO_ACCOUNTS: dict[str, DemoAccount] = {
    account.email: account
    for account in (
        DemoAccount("sarah@example.com", "Sarah Johnson", Role.CLIENT),
        DemoAccount(
            DEMO_BUYER_EMAIL,
            "James Mitchell",
            Role.CLIENT,
            profile={
                "onboarding_step": 2,
                "phone": "0412 345 678",
                "address": "42 Wallaby Way, Sydney",
                "state": "NSW",
                "postcode": "2000",
            },
        ),
        DemoAccount(DEMO_BROKER_EMAIL, "Mike Chen", Role.BROKER),
        DemoAccount(DEMO_CONVEYANCER_EMAIL, "Legal Eagles Conveyancing", Role.CONVEYANCER),
        DemoAccount("admin@properly.com.au", "Properly Admin", Role.ADMIN),
    )
}

DEMO_MATTER_ADDRESS = "14 Bronte Road, Bondi Junction NSW 2022"
DEMO_TASKS: list[tuple[str, TaskStatus, str, Pillar, date]] = [
    ("Sign contract of sale", TaskStatus.COMPLETE, "SIGN", Pillar.PRE_SETTLEMENT, date(2026, 2, 20)),
    ("Pay deposit", TaskStatus.COMPLETE, "PAYMENT", Pillar.EXCHANGE, date(2026, 2, 27)),
    ("Upload proof of identity", TaskStatus.IN_REVIEW, "UPLOAD", Pillar.EXCHANGE, date(2026, 3, 6)),
    ("Review building and pest report", TaskStatus.PENDING, "REVIEW", Pillar.CONDITIONS, date(2026, 3, 13)),
    ("Confirm finance approval", TaskStatus.PENDING, "ACTION", Pillar.CONDITIONS, date(2026, 3, 27)),
]
DEMO_DOCUMENTS: list[tuple[str, str, str, bool]] = [
    ("Contract of Sale.pdf", "2.4 MB", "CONTRACT", True),
    ("Section 10.7 Certificate.pdf", "860 KB", "CERTIFICATE", True),
    ("Driver Licence.jpg", "1.1 MB", "IDENTITY", False),
]
DEMO_REFERRALS: list[tuple[str, ReferralChannel, ReferralStatus, str, int]] = [
    ("James Mitchell", ReferralChannel.PORTAL, ReferralStatus.CONVERTED, DEMO_MATTER_ADDRESS, 55000),
    ("Priya Patel", ReferralChannel.QR, ReferralStatus.PENDING, "7 Ocean Street, Bondi NSW 2026", 0),
    ("Tom Walker", ReferralChannel.SMS, ReferralStatus.SETTLED, "3/21 King Street, Newtown NSW 2042", 48000),
]
DEFAULT_TEMPLATES: list[tuple[str, NotificationChannel, NotificationTrigger, str | None, str]] = [
    (
        "Matter opened",
        NotificationChannel.EMAIL,
        NotificationTrigger.MATTER_CREATED,
        "Your settlement for {{matter_address}} has started",
        "Hi {{recipient_name}},\n\nWe've opened your settlement for {{matter_address}}. "
        "Track progress at {{app_url}}.",
    ),
    (
        "Milestone reached (SMS)",
        NotificationChannel.SMS,
        NotificationTrigger.MILESTONE_REACHED,
        None,
        "Properly: {{pillar}} is complete for {{matter_address}} ({{overall_percent}}% done).",
    ),
    (
        "Settlement date set",
        NotificationChannel.EMAIL,
        NotificationTrigger.SETTLEMENT_DATE_SET,
        "Settlement date confirmed: {{settlement_date}}",
        "Hi {{recipient_name}},\n\n{{matter_address}} is booked to settle on {{settlement_date}}.",
    ),
    (
        "Task completed",
        NotificationChannel.EMAIL,
        NotificationTrigger.TASK_COMPLETED,
        "Task complete: {{task_title}}",
        "Hi {{recipient_name}},\n\n\"{{task_title}}\" is done for {{matter_address}}.",
    ),
]
DEFAULT_ARTICLES: list[dict] = [
    {
        "slug": "what-is-a-cooling-off-period",
        "title": "What is a cooling-off period?",
        "summary": "Your right to withdraw after exchange, and what it costs.",
        "body": "In NSW most residential purchases carry a five business day cooling-off period...",
        "category": "Buying",
        "pillar": Pillar.EXCHANGE.value,
        "reading_minutes": 4,
    },
    {
        "slug": "understanding-settlement-day",
        "title": "Understanding settlement day",
        "summary": "What happens when funds and title change hands.",
        "body": "On settlement day your conveyancer and the seller's representative meet in PEXA...",
        "category": "Settlement",
        "pillar": Pillar.SETTLEMENT.value,
        "reading_minutes": 5,
    },
    {
        "slug": "finance-approval-checklist",
        "title": "Finance approval checklist",
        "summary": "Documents your lender will ask for.",
        "body": "Unconditional approval usually requires payslips, bank statements and a valuation...",
        "category": "Finance",
        "pillar": Pillar.CONDITIONS.value,
        "reading_minutes": 3,
    },
]


def _get_or_create_user(db: Session, account: DemoAccount) -> tuple[User, bool]:
    user = user_service.get_user_by_email(db, account.email)
    if user:
        if user.role != account.role.value:
            user.role = account.role.value
        return user, False
    user = User(
        email=account.email,
        display_name=account.display_name,
        role=account.role.value,
        **account.profile,
    )
    db.add(user)
    db.flush()
    return user, True


def _ensure_demo_matter(db: Session, buyer: User, broker: User, conveyancer: User) -> tuple[Matter, bool]:
    matter = (
        db.query(Matter)
        .filter(Matter.client_user_id == buyer.id, Matter.address == DEMO_MATTER_ADDRESS)
        .first()
    )
    if matter:
        return matter, False

    matter = Matter(
        address=DEMO_MATTER_ADDRESS,
        client_user_id=buyer.id,
        broker_user_id=broker.id,
        conveyancer_user_id=conveyancer.id,
        status=MatterStatus.ACTIVE.value,
        transaction_type="Purchase",
        pillar_pre_settlement=PillarStatus.COMPLETE.value,
        pillar_exchange=PillarStatus.IN_PROGRESS.value,
        settlement_date=date(2026, 4, 15),
        contract_price_cents=1_250_000_00,
        deposit_amount_cents=125_000_00,
        deposit_paid=True,
    )
    db.add(matter)
    db.flush()

    for title, status, category, pillar, due in DEMO_TASKS:
        db.add(
            Task(
                matter_id=matter.id,
                title=title,
                status=status.value,
                category=category,
                pillar=pillar.value,
                due_date=due,
            )
        )
    for name, size, category, locked in DEMO_DOCUMENTS:
        db.add(
            Document(
                matter_id=matter.id,
                name=name,
                size_label=size,
                category=category,
                locked=locked,
                uploaded_by_user_id=conveyancer.id if locked else buyer.id,
            )
        )
    return matter, True


def _ensure_referrals(db: Session, broker: User, matter: Matter) -> bool:
    if db.query(Referral).filter(Referral.broker_user_id == broker.id).first():
        return False
    from app.core.security import generate_qr_token

    for client_name, channel, status, address, commission in DEMO_REFERRALS:
        referral = Referral(
            broker_user_id=broker.id,
            client_name=client_name,
            property_address=address,
            transaction_type="Purchase",
            channel=channel.value,
            status=status.value,
            commission_cents=commission or None,
            qr_token=generate_qr_token() if channel == ReferralChannel.QR else None,
        )
        if status == ReferralStatus.CONVERTED:
            referral.matter_id = matter.id
        db.add(referral)
    return True


def _ensure_templates(db: Session) -> bool:
    if db.query(NotificationTemplate).first():
        return False
    for name, channel, trigger, subject, body in DEFAULT_TEMPLATES:
        db.add(
            NotificationTemplate(
                name=name,
                channel=channel.value,
                trigger=trigger.value,
                subject=subject,
                body=body,
            )
        )
    return True


def _ensure_articles(db: Session) -> bool:
    changed = False
    for article in DEFAULT_ARTICLES:
        if db.query(PlaybookArticle).filter(PlaybookArticle.slug == article["slug"]).first():
            continue
        db.add(PlaybookArticle(**article))
        changed = True
    return changed


def seed_demo_data(db: Session) -> dict:
    """Create/repair demo users, matter, referrals, templates and articles (idempotent)."""
    users: dict[str, User] = {}
    changed = False
    for email, account in DEMO_ACCOUNTS.items():
        user, created = _get_or_create_user(db, account)
        users[email] = user
        changed = changed or created

    matter, created = _ensure_demo_matter(
        db,
        users[DEMO_BUYER_EMAIL],
        users[DEMO_BROKER_EMAIL],
        users[DEMO_CONVEYANCER_EMAIL],
    )
    changed = created or changed
    changed = _ensure_referrals(db, users[DEMO_BROKER_EMAIL], matter) or changed
    changed = _ensure_templates(db) or changed
    changed = _ensure_articles(db) or changed
    db.commit()

    return {
        "status": "seeded" if changed else "already_seeded",
        "matter_id": str(matter.id),
        "users": sorted(
            ({"email": email, "user_id": str(u.id), "role": u.role} for email, u in users.items()),
            key=lambda item: item["email"],
        ),
    }


def demo_login(db: Session, email: str) -> tuple[str, User]:
    """
    Sign in as a fixed demo identity.

    Provisions the user through the normal identity path, applies the demo
    role and profile, and for the demo buyer makes sure the starter matter
    exists.
    """
    if not settings.DEMO_LOGIN_ENABLED:
        raise NotFound("Demo login is disabled")

    email = email.strip().lower()
    account = DEMO_ACCOUNTS.get(email)
    if not account:
        raise ValidationError("Not a demo account", field="email")

    subject = f"{DEMO_SUBJECT_PREFIX}{email}"
    user = user_service.provision_user(db, subject, email, account.display_name)
    user.role = account.role.value
    if user.onboarding_step == 0 and not user.onboarding_complete:
        for key, value in account.profile.items():
            setattr(user, key, value)
    if account.role != Role.CLIENT:
        user.onboarding_complete = True
        user.voi_status = VoiStatus.VERIFIED.value
    db.commit()
    db.refresh(user)

    if email == DEMO_BUYER_EMAIL:
        seed_demo_data(db)
        db.refresh(user)

    token = create_identity_token(subject, email, account.display_name)
    logger.info("Demo login for %s", email)
    return token, user
