"""Notification service - templates, rendering, dispatch and delivery logs.

Dispatch is synchronous and best-effort: every attempt is written to
notification_logs as sent or failed, nothing is retried, and no delivery
error propagates to the caller.
"""

import logging
import re
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.async_utils import run_async
from app.core.config import settings
from app.core.errors import AppError, NotFound
from app.core.pillars import matter_progress
from app.db.enums import DeliveryStatus, NotificationChannel, NotificationTrigger
from app.db.models import Matter, NotificationLog, NotificationTemplate, User
from app.schemas.notification import TemplateCreate, TemplateUpdate

logger = logging.getLogger(__name__)

# Variable pattern for template substitution: {{variable_name}} (inner spaces allowed)
VARIABLE_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

DEFAULT_LOG_LIMIT = 100


# =============================================================================
# Templates
# =============================================================================

def list_templates(
    db: Session,
    trigger: NotificationTrigger | None = None,
    channel: NotificationChannel | None = None,
) -> list[NotificationTemplate]:
    query = db.query(NotificationTemplate)
    if trigger:
        query = query.filter(NotificationTemplate.trigger == trigger.value)
    if channel:
        query = query.filter(NotificationTemplate.channel == channel.value)
    return query.order_by(NotificationTemplate.trigger, NotificationTemplate.name).all()


def get_template(db: Session, template_id: UUID) -> NotificationTemplate:
    template = db.get(NotificationTemplate, template_id)
    if not template:
        raise NotFound("Template not found")
    return template


def create_template(db: Session, data: TemplateCreate) -> NotificationTemplate:
    template = NotificationTemplate(
        name=data.name,
        channel=data.channel.value,
        trigger=data.trigger.value,
        subject=data.subject,
        body=data.body,
        active=data.active,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def update_template(
    db: Session, template: NotificationTemplate, data: TemplateUpdate
) -> NotificationTemplate:
    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field != "subject":
            continue
        if field in ("channel", "trigger"):
            value = value.value
        setattr(template, field, value)
    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template: NotificationTemplate) -> None:
    db.delete(template)
    db.commit()


# =============================================================================
# Logs
# =============================================================================

def list_logs(
    db: Session,
    channel: NotificationChannel | None = None,
    status: DeliveryStatus | None = None,
    limit: int = DEFAULT_LOG_LIMIT,
) -> list[NotificationLog]:
    query = db.query(NotificationLog)
    if channel:
        query = query.filter(NotificationLog.channel == channel.value)
    if status:
        query = query.filter(NotificationLog.status == status.value)
    return query.order_by(NotificationLog.created_at.desc()).limit(limit).all()


# =============================================================================
# Rendering
# =============================================================================

def render_template(text: str | None, variables: dict[str, str]) -> str:
    """
    Replace {{name}} placeholders with values.

    Missing variables are replaced with empty string.
    """
    if not text:
        return ""

    def replace_var(match: re.Match) -> str:
        return str(variables.get(match.group(1), ""))

    return VARIABLE_PATTERN.sub(replace_var, text)


def build_variables(
    db: Session,
    recipient: User,
    matter: Matter | None = None,
    extra: dict[str, str] | None = None,
) -> dict[str, str]:
    """Flat variables for a recipient and optional matter."""
    variables: dict[str, str] = {
        "recipient_name": recipient.display_name,
        "app_url": settings.APP_URL,
    }
    if matter:
        client = db.get(User, matter.client_user_id)
        progress = matter_progress(matter)
        variables.update(
            {
                "client_name": client.display_name if client else "",
                "client_email": client.email if client else "",
                "matter_address": matter.address,
                "matter_status": matter.status,
                "settlement_date": (
                    matter.settlement_date.strftime("%d %B %Y") if matter.settlement_date else ""
                ),
                "overall_percent": str(progress.overall_percent),
            }
        )
    if extra:
        variables.update({k: str(v) for k, v in extra.items() if v is not None})
    return variables


# =============================================================================
# Dispatch
# =============================================================================

def _deliver(channel: str, recipient: User, subject: str, body: str) -> None:
    """Call the channel adapter. Raises on any delivery failure."""
    from app.services import resend_email_service, twilio_sms_service

    if channel == NotificationChannel.EMAIL.value:
        run_async(
            resend_email_service.send_email(
                recipient.email, subject, resend_email_service.text_to_html(body), text=body
            )
        )
    elif channel == NotificationChannel.SMS.value:
        if not recipient.phone:
            raise ValueError("Recipient has no phone number")
        run_async(twilio_sms_service.send_sms(recipient.phone, body))
    else:
        raise ValueError(f"Channel {channel} is not supported")


def dispatch(
    db: Session,
    template: NotificationTemplate,
    recipient: User,
    matter: Matter | None = None,
    extra: dict[str, str] | None = None,
) -> NotificationLog:
    """Render one template for one recipient, attempt delivery, record the outcome."""
    variables = build_variables(db, recipient, matter, extra)
    subject = render_template(template.subject, variables)
    body = render_template(template.body, variables)

    status = DeliveryStatus.SENT
    error: str | None = None
    try:
        _deliver(template.channel, recipient, subject, body)
    except AppError as exc:
        status, error = DeliveryStatus.FAILED, exc.message
    except Exception as exc:
        status, error = DeliveryStatus.FAILED, str(exc) or exc.__class__.__name__
        logger.warning("Notification delivery failed template=%s: %s", template.id, error)

    log = NotificationLog(
        template_id=template.id,
        recipient_user_id=recipient.id,
        matter_id=matter.id if matter else None,
        channel=template.channel,
        trigger=template.trigger,
        subject=subject or None,
        body=body,
        status=status.value,
        error=error,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


def notify(
    db: Session,
    trigger: NotificationTrigger,
    recipient: User,
    matter: Matter | None = None,
    extra: dict[str, str] | None = None,
) -> list[NotificationLog]:
    """Dispatch every active template for a trigger. Never raises."""
    try:
        templates = (
            db.query(NotificationTemplate)
            .filter(
                NotificationTemplate.trigger == trigger.value,
                NotificationTemplate.active.is_(True),
            )
            .all()
        )
        return [dispatch(db, t, recipient, matter, extra) for t in templates]
    except Exception:
        db.rollback()
        logger.exception("Notification dispatch failed for trigger %s", trigger.value)
        return []
