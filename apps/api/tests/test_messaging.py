"""Tests for direct email and SMS sends."""
import pytest
from httpx import AsyncClient

from app.services import resend_email_service, twilio_sms_service


@pytest.fixture
def outbox(monkeypatch) -> list[tuple]:
    sent: list[tuple] = []

    async def fake_email(to, subject, html_body, text=None):
        sent.append(("email", to, subject))
        return {"id": "em_1"}

    async def fake_sms(to, body):
        sent.append(("sms", to, body))
        return {"id": "SM1", "status": "queued"}

    monkeypatch.setattr(resend_email_service, "send_email", fake_email)
    monkeypatch.setattr(twilio_sms_service, "send_sms", fake_sms)
    return sent


@pytest.mark.asyncio
async def test_admin_sends_email(client: AsyncClient, auth_headers, admin_user, outbox):
    response = await client.post(
        "/api/email/send",
        json={"to": "buyer@example.com", "subject": "Keys", "html": "<p>Ready</p>"},
        headers=auth_headers(admin_user),
    )
    assert response.json() == {"id": "em_1", "status": "sent"}
    assert outbox == [("email", "buyer@example.com", "Keys")]


@pytest.mark.asyncio
async def test_admin_sends_sms(client: AsyncClient, auth_headers, admin_user, outbox):
    response = await client.post(
        "/api/sms/send",
        json={"to": "+61400111222", "body": "Settlement booked"},
        headers=auth_headers(admin_user),
    )
    assert response.json() == {"id": "SM1", "status": "queued"}


@pytest.mark.asyncio
async def test_non_admin_cannot_send(client: AsyncClient, auth_headers, broker_user, outbox):
    response = await client.post(
        "/api/sms/send",
        json={"to": "+61400111222", "body": "hi"},
        headers=auth_headers(broker_user),
    )
    assert response.status_code == 403
    assert outbox == []


@pytest.mark.asyncio
async def test_welcome_goes_to_caller(client: AsyncClient, auth_headers, client_user, outbox):
    response = await client.post("/api/email/welcome", headers=auth_headers(client_user))
    assert response.status_code == 200
    assert outbox[0][:2] == ("email", client_user.email)
