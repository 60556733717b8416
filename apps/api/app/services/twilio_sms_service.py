"""Twilio SMS adapter."""

from __future__ import annotations

import logging

from app.core.config import settings
from app.core.errors import DependencyUnavailable
from app.services import http_service

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"
VENDOR = "Twilio"


def is_configured() -> bool:
    return bool(
        settings.TWILIO_ACCOUNT_SID
        and settings.TWILIO_AUTH_TOKEN
        and settings.TWILIO_PHONE_NUMBER
    )


async def send_sms(to: str, body: str) -> dict:
    """
    Send one SMS.

    Returns:
        {"id": <message sid>, "status": <twilio status>}
    """
    if not is_configured():
        raise DependencyUnavailable("SMS service not configured")

    response = await http_service.send_vendor_request(
        "POST",
        TWILIO_MESSAGES_URL.format(sid=settings.TWILIO_ACCOUNT_SID),
        vendor=VENDOR,
        auth=(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN),
        data={"To": to, "From": settings.TWILIO_PHONE_NUMBER, "Body": body},
    )
    data = response.json()
    logger.info("SMS sent via Twilio sid=%s", data.get("sid"))
    return {"id": data.get("sid"), "status": data.get("status", "queued")}


# Canned messages

def verification_message(code: str) -> str:
    return (
        f"Your Properly verification code is: {code}. "
        f"This code expires in {settings.OTP_TTL_MINUTES} minutes."
    )


def milestone_message(address: str, pillar_label: str) -> str:
    return f"Properly: {pillar_label} is complete for {address}. View progress at {settings.APP_URL}"


def task_message(task_title: str) -> str:
    return f"Properly: new task \"{task_title}\" needs your attention. {settings.APP_URL}"


async def send_verification_code(to: str, code: str) -> dict:
    return await send_sms(to, verification_message(code))
