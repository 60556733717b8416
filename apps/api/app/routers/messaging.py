"""Messaging router - direct email and SMS sends."""

from fastapi import APIRouter, Depends

from app.core.deps import get_current_user, require_roles
from app.db.enums import Role
from app.db.models import User
from app.schemas.integrations import EmailSendRequest, SendResult, SmsSendRequest
from app.services import resend_email_service, twilio_sms_service

router = APIRouter()


@router.post("/email/send", response_model=SendResult)
async def send_email(
    data: EmailSendRequest,
    user: User = Depends(require_roles([Role.ADMIN])),
):
    result = await resend_email_service.send_email(data.to, data.subject, data.html)
    return SendResult(id=result.get("id"))


@router.post("/email/welcome", response_model=SendResult)
async def send_welcome_email(user: User = Depends(get_current_user)):
    """Send the welcome email to the caller."""
    result = await resend_email_service.send_welcome_email(user.email, user.display_name)
    return SendResult(id=result.get("id"))


@router.post("/sms/send", response_model=SendResult)
async def send_sms(
    data: SmsSendRequest,
    user: User = Depends(require_roles([Role.ADMIN])),
):
    result = await twilio_sms_service.send_sms(data.to, data.body)
    return SendResult(id=result.get("id"), status=result.get("status", "sent"))
