"""Didit identity verification (VOI) adapter."""

from __future__ import annotations

import hashlib
import hmac
import logging
import time

from app.core.config import settings
from app.core.errors import DependencyUnavailable
from app.db.enums import VoiStatus
from app.services import http_service

logger = logging.getLogger(__name__)

VENDOR = "Didit"
SIGNATURE_MAX_SKEW_SECONDS = 300
DEFAULT_FEATURES = "OCR + FACE"

# Vendor decision -> local status. Anything else leaves the user pending.
DECISION_STATUS = {
    "approved": VoiStatus.VERIFIED,
    "declined": VoiStatus.FAILED,
    "expired": VoiStatus.FAILED,
    "abandoned": VoiStatus.FAILED,
}


def is_configured() -> bool:
    return bool(settings.DIDIT_API_KEY)


def _headers() -> dict[str, str]:
    return {"x-api-key": settings.DIDIT_API_KEY, "Content-Type": "application/json"}


def _callback_url() -> str:
    return settings.DIDIT_CALLBACK_URL or f"{settings.APP_URL}/onboarding?voi=complete"


async def create_session(vendor_data: str) -> dict:
    """
    Create a hosted verification session.

    vendor_data carries our user id and comes back on the webhook.

    Returns:
        {"session_id": str, "url": str | None}
    """
    if not is_configured():
        raise DependencyUnavailable("Identity verification not configured")

    response = await http_service.send_vendor_request(
        "POST",
        f"{settings.DIDIT_BASE_URL}/verification/sessions",
        vendor=VENDOR,
        headers=_headers(),
        json={
            "vendor_data": vendor_data,
            "callback": _callback_url(),
            "features": DEFAULT_FEATURES,
        },
    )
    data = response.json()
    return {"session_id": data.get("session_id"), "url": data.get("url")}


async def get_session(session_id: str) -> dict:
    if not is_configured():
        raise DependencyUnavailable("Identity verification not configured")

    response = await http_service.send_vendor_request(
        "GET",
        f"{settings.DIDIT_BASE_URL}/verification/sessions/{session_id}",
        vendor=VENDOR,
        headers=_headers(),
    )
    data = response.json()
    return {
        "session_id": data.get("session_id", session_id),
        "status": data.get("status", "Unknown"),
        "decision": data.get("decision"),
    }


def decision_to_status(vendor_status: str | None) -> VoiStatus | None:
    if not vendor_status:
        return None
    return DECISION_STATUS.get(vendor_status.strip().lower())


def verify_webhook_signature(
    raw_body: bytes,
    signature: str | None,
    timestamp: str | None,
    now: float | None = None,
) -> bool:
    """
    Check the HMAC-SHA256 of "<timestamp>.<body>" against the shared secret.

    Stale timestamps are rejected to limit replay.
    """
    if not settings.DIDIT_WEBHOOK_SECRET or not signature or not timestamp:
        return False
    try:
        sent_at = int(timestamp)
    except ValueError:
        return False
    current = now if now is not None else time.time()
    if abs(current - sent_at) > SIGNATURE_MAX_SKEW_SECONDS:
        return False

    message = timestamp.encode("utf-8") + b"." + raw_body
    expected = hmac.new(
        settings.DIDIT_WEBHOOK_SECRET.encode("utf-8"), message, hashlib.sha256
    ).hexdigest()
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
