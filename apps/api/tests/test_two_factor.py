"""Tests for phone one-time codes."""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.core.errors import ValidationError
from app.core.security import hash_otp_code
from app.db.models import OtpCode
from app.services import otp_service, twilio_sms_service


@pytest.fixture
def sms_outbox(monkeypatch) -> list[tuple[str, str]]:
    outbox: list[tuple[str, str]] = []
    monkeypatch.setattr(settings, "TWILIO_ACCOUNT_SID", "AC123")
    monkeypatch.setattr(settings, "TWILIO_AUTH_TOKEN", "token")
    monkeypatch.setattr(settings, "TWILIO_PHONE_NUMBER", "+61200000000")

    async def fake_send_verification_code(to, code):
        outbox.append((to, code))
        return {"id": "SM1", "status": "queued"}

    monkeypatch.setattr(twilio_sms_service, "send_verification_code", fake_send_verification_code)
    return outbox


def test_issue_replaces_outstanding_codes(db, make_user):
    user = make_user(phone="+61400111222")
    otp_service.issue_code(db, user)
    code, expires_at = otp_service.issue_code(db, user)

    rows = db.query(OtpCode).filter(OtpCode.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].code_hash == hash_otp_code(code)
    assert rows[0].code_hash != code
    assert len(code) == 6 and code.isdigit()
    assert expires_at > datetime.now(timezone.utc) + timedelta(minutes=9)


def test_expired_code_rejected(db, make_user):
    user = make_user(phone="+61400111222")
    code, _ = otp_service.issue_code(db, user)
    row = db.query(OtpCode).one()
    row.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
    db.commit()

    with pytest.raises(ValidationError, match="expired"):
        otp_service.verify_code(db, user, code)


def test_attempts_are_capped(db, make_user):
    user = make_user(phone="+61400111222")
    code, _ = otp_service.issue_code(db, user)
    wrong = "000000" if code != "000000" else "111111"
    for _ in range(settings.OTP_MAX_ATTEMPTS):
        with pytest.raises(ValidationError, match="Invalid"):
            otp_service.verify_code(db, user, wrong)
    with pytest.raises(ValidationError, match="Too many"):
        otp_service.verify_code(db, user, code)


def test_mask_phone():
    assert otp_service.mask_phone("+61 400 111 222") == "*********222"
    assert otp_service.mask_phone(None) is None


@pytest.mark.asyncio
async def test_full_two_factor_flow(client: AsyncClient, auth_headers, client_user, sms_outbox):
    headers = auth_headers(client_user)

    setup = await client.post("/api/2fa/setup", json={"phone": "+61400111222"}, headers=headers)
    assert setup.status_code == 200
    assert setup.json()["phone"] == "*********222"
    assert setup.json()["enabled"] is False

    sent = await client.post("/api/2fa/send", headers=headers)
    assert sent.status_code == 200
    assert sent.json()["sent"] is True
    to, code = sms_outbox[0]
    assert to == "+61400111222"

    verified = await client.post("/api/2fa/verify", json={"code": code}, headers=headers)
    assert verified.status_code == 200
    assert verified.json()["enabled"] is True

    status = await client.get("/api/2fa/status", headers=headers)
    assert status.json()["enabled"] is True
    assert status.json()["verifiedAt"] is not None


@pytest.mark.asyncio
async def test_send_without_sms_configured_is_503(client: AsyncClient, auth_headers, make_user):
    user = make_user(phone="+61400111222")
    response = await client.post("/api/2fa/send", headers=auth_headers(user))
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_verify_rejects_malformed_code(client: AsyncClient, auth_headers, client_user):
    response = await client.post("/api/2fa/verify", json={"code": "12ab"}, headers=auth_headers(client_user))
    assert response.status_code == 400
    assert response.json()["field"] == "code"
