"""Verification router - identity verification sessions and vendor webhook."""

import hmac
import json
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_current_user, get_db
from app.core.errors import DependencyUnavailable, Unauthorized, ValidationError
from app.core.rate_limit import PUBLIC_LIMIT, limiter
from app.db.enums import VoiStatus
from app.db.models import User
from app.schemas.integrations import VerificationStartRead, VerificationStatusRead
from app.services import didit_service, verification_service

logger = logging.getLogger(__name__)

router = APIRouter()

SIGNATURE_HEADER = "X-Signature-V2"
LEGACY_SIGNATURE_HEADER = "X-Signature"
TIMESTAMP_HEADER = "X-Timestamp"
CALLBACK_SECRET_HEADER = "X-Callback-Secret"


@router.post("/start", response_model=VerificationStartRead)
async def start_verification(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Open a hosted VOI session and mark the user pending."""
    session = await didit_service.create_session(vendor_data=str(user.id))
    user = verification_service.mark_pending(db, user, session["session_id"])
    return VerificationStartRead(
        session_id=session["session_id"],
        url=session.get("url"),
        voi_status=VoiStatus(user.voi_status),
    )


@router.get("/status/{session_id}", response_model=VerificationStatusRead)
async def get_verification_status(
    session_id: str,
    user: User = Depends(get_current_user),
):
    verification_service.check_session_owner(user, session_id)
    return await didit_service.get_session(session_id)


def _webhook_authorized(request: Request, raw_body: bytes) -> bool:
    signature = request.headers.get(SIGNATURE_HEADER) or request.headers.get(
        LEGACY_SIGNATURE_HEADER
    )
    if signature:
        return didit_service.verify_webhook_signature(
            raw_body, signature, request.headers.get(TIMESTAMP_HEADER)
        )
    callback_secret = request.headers.get(CALLBACK_SECRET_HEADER)
    if callback_secret:
        return hmac.compare_digest(
            callback_secret.encode("utf-8"), settings.DIDIT_WEBHOOK_SECRET.encode("utf-8")
        )
    return False


@router.post("/webhook")
@limiter.limit(PUBLIC_LIMIT)
async def verification_webhook(request: Request, db: Session = Depends(get_db)):
    """Vendor decision callback (public, signature checked)."""
    if not settings.DIDIT_WEBHOOK_SECRET:
        raise DependencyUnavailable("Identity verification webhook not configured")

    raw_body = await request.body()
    if not _webhook_authorized(request, raw_body):
        logger.warning("Rejected verification webhook with bad signature")
        raise Unauthorized("Invalid webhook signature")

    try:
        payload = json.loads(raw_body or b"{}")
    except ValueError:
        raise ValidationError("Webhook body must be JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Webhook body must be a JSON object")

    user = verification_service.apply_webhook(db, payload)
    return {"received": True, "updated": user is not None}
