"""Resend email adapter."""

from __future__ import annotations

import html
import logging

from app.core.config import settings
from app.core.errors import DependencyUnavailable
from app.services import http_service

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"
VENDOR = "Resend"


def is_configured() -> bool:
    return bool(settings.RESEND_API_KEY)


async def send_email(to: str, subject: str, html_body: str, text: str | None = None) -> dict:
    """
    Send one email.

    Returns:
        {"id": <resend message id>}
    """
    if not is_configured():
        raise DependencyUnavailable("Email service not configured")

    payload: dict[str, object] = {
        "from": settings.EMAIL_FROM,
        "to": [to],
        "subject": subject,
        "html": html_body,
    }
    if text:
        payload["text"] = text

    response = await http_service.send_vendor_request(
        "POST",
        RESEND_SEND_URL,
        vendor=VENDOR,
        headers={
            "Authorization": f"Bearer {settings.RESEND_API_KEY}",
            "Content-Type": "application/json",
        },
        json=payload,
    )
    message_id = response.json().get("id")
    logger.info("Email sent via Resend id=%s", message_id)
    return {"id": message_id}


def text_to_html(text: str) -> str:
    """Wrap plain template text as minimal HTML (escaped, line breaks kept)."""
    paragraphs = [p for p in text.split("\n\n") if p.strip()]
    return "".join(
        f"<p>{html.escape(p).replace(chr(10), '<br>')}</p>" for p in paragraphs
    )


def welcome_email(name: str) -> tuple[str, str]:
    subject = "Welcome to Properly"
    body = (
        f"Hi {name},\n\n"
        "Your settlement dashboard is ready. Track every stage of your property "
        "settlement, upload documents and message your conveyancer in one place.\n\n"
        f"Get started: {settings.APP_URL}"
    )
    return subject, text_to_html(body)


async def send_welcome_email(to: str, name: str) -> dict:
    subject, body = welcome_email(name)
    return await send_email(to, subject, body)
