"""Tests for identity verification sessions and the vendor webhook."""
import hashlib
import hmac
import json
import time

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.services import didit_service

WEBHOOK_SECRET = "whsec_test"


def _sign(body: bytes, timestamp: str) -> str:
    return hmac.new(
        WEBHOOK_SECRET.encode(), timestamp.encode() + b"." + body, hashlib.sha256
    ).hexdigest()


@pytest.fixture
def webhook_secret(monkeypatch):
    monkeypatch.setattr(settings, "DIDIT_WEBHOOK_SECRET", WEBHOOK_SECRET)


def test_signature_roundtrip(webhook_secret):
    body = b'{"status": "Approved"}'
    timestamp = str(int(time.time()))
    assert didit_service.verify_webhook_signature(body, _sign(body, timestamp), timestamp)
    assert not didit_service.verify_webhook_signature(body + b" ", _sign(body, timestamp), timestamp)


def test_stale_signature_rejected(webhook_secret):
    body = b"{}"
    timestamp = "1700000000"
    assert not didit_service.verify_webhook_signature(
        body, _sign(body, timestamp), timestamp, now=1700000000 + 301
    )


def test_non_ascii_signature_rejected(webhook_secret):
    timestamp = str(int(time.time()))
    assert not didit_service.verify_webhook_signature(b"{}", "sig\u00e9", timestamp)


@pytest.mark.parametrize(
    "vendor_status,expected",
    [("Approved", "verified"), ("Declined", "failed"), ("Expired", "failed"), ("In Review", None)],
)
def test_decision_mapping(vendor_status, expected):
    status = didit_service.decision_to_status(vendor_status)
    assert (status.value if status else None) == expected


@pytest.mark.asyncio
async def test_start_marks_user_pending(client: AsyncClient, auth_headers, client_user, monkeypatch):
    async def fake_create_session(vendor_data):
        assert vendor_data == str(client_user.id)
        return {"session_id": "sess-1", "url": "https://verify.test/sess-1"}

    monkeypatch.setattr(didit_service, "create_session", fake_create_session)
    response = await client.post("/api/verification/start", headers=auth_headers(client_user))
    assert response.status_code == 200
    assert response.json() == {
        "sessionId": "sess-1",
        "url": "https://verify.test/sess-1",
        "voiStatus": "pending",
    }


@pytest.mark.asyncio
async def test_start_unconfigured_is_503(client: AsyncClient, auth_headers, client_user):
    response = await client.post("/api/verification/start", headers=auth_headers(client_user))
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_status_for_other_session_is_403(client: AsyncClient, auth_headers, client_user):
    response = await client.get(
        "/api/verification/status/someone-elses", headers=auth_headers(client_user)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_webhook_without_secret_is_503(client: AsyncClient):
    response = await client.post("/api/verification/webhook", json={})
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_webhook_bad_signature_is_401(client: AsyncClient, webhook_secret):
    response = await client.post(
        "/api/verification/webhook",
        content=b"{}",
        headers={"X-Signature-V2": "deadbeef", "X-Timestamp": str(int(time.time()))},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_webhook_non_ascii_secret_header_is_401(client: AsyncClient, webhook_secret):
    response = await client.post(
        "/api/verification/webhook",
        content=b"{}",
        headers={"X-Callback-Secret": "s\u00e9cret".encode("latin-1")},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_webhook_approved_marks_verified(client: AsyncClient, db, make_user, webhook_secret):
    user = make_user(voi_status="pending", voi_session_id="sess-9")
    body = json.dumps(
        {"session_id": "sess-9", "status": "Approved", "vendor_data": str(user.id)}
    ).encode()
    timestamp = str(int(time.time()))

    response = await client.post(
        "/api/verification/webhook",
        content=body,
        headers={
            "Content-Type": "application/json",
            "X-Signature-V2": _sign(body, timestamp),
            "X-Timestamp": timestamp,
        },
    )
    assert response.status_code == 200
    assert response.json() == {"received": True, "updated": True}
    db.refresh(user)
    assert user.voi_status == "verified"


@pytest.mark.asyncio
async def test_webhook_shared_secret_header(client: AsyncClient, db, make_user, webhook_secret):
    user = make_user(voi_status="pending")
    response = await client.post(
        "/api/verification/webhook",
        json={"status": "Declined", "vendor_data": str(user.id)},
        headers={"X-Callback-Secret": WEBHOOK_SECRET},
    )
    assert response.json()["updated"] is True
    db.refresh(user)
    assert user.voi_status == "failed"


@pytest.mark.asyncio
async def test_webhook_unknown_user_acknowledged(client: AsyncClient, webhook_secret):
    response = await client.post(
        "/api/verification/webhook",
        json={"status": "Approved", "vendor_data": "not-a-uuid"},
        headers={"X-Callback-Secret": WEBHOOK_SECRET},
    )
    assert response.status_code == 200
    assert response.json()["updated"] is False
