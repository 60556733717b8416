"""Notifications router - templates, delivery logs and test sends (admin only)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles
from app.core.matter_access import check_matter_access
from app.db.enums import DeliveryStatus, NotificationChannel, NotificationTrigger, Role
from app.db.models import User
from app.schemas.notification import (
    NotificationLogRead,
    NotificationTestRequest,
    TemplateCreate,
    TemplateRead,
    TemplateUpdate,
)
from app.services import matter_service, notification_service

require_admin = require_roles([Role.ADMIN])

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/notification-templates", response_model=list[TemplateRead])
def list_templates(
    trigger: NotificationTrigger | None = None,
    channel: NotificationChannel | None = None,
    db: Session = Depends(get_db),
):
    return notification_service.list_templates(db, trigger=trigger, channel=channel)


@router.post("/notification-templates", response_model=TemplateRead, status_code=201)
def create_template(data: TemplateCreate, db: Session = Depends(get_db)):
    return notification_service.create_template(db, data)


@router.get("/notification-templates/{template_id}", response_model=TemplateRead)
def get_template(template_id: UUID, db: Session = Depends(get_db)):
    return notification_service.get_template(db, template_id)


@router.patch("/notification-templates/{template_id}", response_model=TemplateRead)
def update_template(template_id: UUID, data: TemplateUpdate, db: Session = Depends(get_db)):
    template = notification_service.get_template(db, template_id)
    return notification_service.update_template(db, template, data)


@router.delete("/notification-templates/{template_id}", status_code=204)
def delete_template(template_id: UUID, db: Session = Depends(get_db)):
    template = notification_service.get_template(db, template_id)
    notification_service.delete_template(db, template)
    return Response(status_code=204)


@router.get("/notification-logs", response_model=list[NotificationLogRead])
def list_logs(
    channel: NotificationChannel | None = None,
    status: DeliveryStatus | None = None,
    limit: int = Query(notification_service.DEFAULT_LOG_LIMIT, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return notification_service.list_logs(db, channel=channel, status=status, limit=limit)


@router.post("/notifications/test", response_model=NotificationLogRead)
def send_test_notification(
    data: NotificationTestRequest,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Dispatch one template to the caller. The delivery log entry is returned."""
    template = notification_service.get_template(db, data.template_id)
    matter = None
    if data.matter_id:
        matter = check_matter_access(matter_service.get_matter(db, data.matter_id), user)
    return notification_service.dispatch(db, template, user, matter)
