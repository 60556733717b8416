"""Tests for the external service adapters."""
from datetime import datetime, timedelta, timezone

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from app.core.config import settings
from app.core.errors import DependencyUnavailable, ExternalServiceError
from app.services import (
    apple_maps_service,
    http_service,
    pexa_service,
    smokeball_service,
    twilio_sms_service,
)


class _FakeAsyncClient:
    """Stand-in for httpx.AsyncClient returning one canned response."""

    calls: list[tuple[str, str, dict]] = []

    def __init__(self, response=None, error=None, **kwargs):
        self._response = response
        self._error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self._error:
            raise self._error
        return self._response


def _patch_client(monkeypatch, response=None, error=None) -> list:
    calls: list = []

    class _Client(_FakeAsyncClient):
        pass

    _Client.calls = calls
    monkeypatch.setattr(
        http_service.httpx,
        "AsyncClient",
        lambda **kwargs: _Client(response=response, error=error, **kwargs),
    )
    return calls


def _response(status_code: int, payload=None, text: str | None = None) -> httpx.Response:
    request = httpx.Request("GET", "https://vendor.test")
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=payload, request=request)


# =============================================================================
# send_vendor_request
# =============================================================================

@pytest.mark.asyncio
async def test_vendor_request_returns_success(monkeypatch):
    calls = _patch_client(monkeypatch, response=_response(200, {"ok": True}))
    response = await http_service.send_vendor_request("GET", "https://vendor.test/x", vendor="Test")
    assert response.json() == {"ok": True}
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_vendor_error_is_502_without_vendor_body(monkeypatch, caplog):
    calls = _patch_client(monkeypatch, response=_response(500, text="stack trace secret"))
    with pytest.raises(ExternalServiceError) as exc_info:
        await http_service.send_vendor_request("POST", "https://vendor.test/x", vendor="Test")
    assert exc_info.value.status_code == 502
    assert "secret" not in exc_info.value.message
    assert "stack trace secret" in caplog.text
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_vendor_network_error_is_not_retried(monkeypatch):
    calls = _patch_client(monkeypatch, error=httpx.ConnectError("refused"))
    with pytest.raises(ExternalServiceError, match="unreachable"):
        await http_service.send_vendor_request("GET", "https://vendor.test/x", vendor="Test")
    assert len(calls) == 1


# =============================================================================
# Twilio
# =============================================================================

@pytest.mark.asyncio
async def test_sms_unconfigured_is_unavailable():
    with pytest.raises(DependencyUnavailable):
        await twilio_sms_service.send_sms("+61400000000", "hi")


@pytest.mark.asyncio
async def test_sms_posts_form_to_twilio(monkeypatch):
    monkeypatch.setattr(settings, "TWILIO_ACCOUNT_SID", "AC123")
    monkeypatch.setattr(settings, "TWILIO_AUTH_TOKEN", "token")
    monkeypatch.setattr(settings, "TWILIO_PHONE_NUMBER", "+61200000000")
    captured = {}

    async def fake_request(method, url, *, vendor, **kwargs):
        captured.update(method=method, url=url, **kwargs)
        return _response(201, {"sid": "SM1", "status": "queued"})

    monkeypatch.setattr(http_service, "send_vendor_request", fake_request)
    result = await twilio_sms_service.send_sms("+61400000000", "Your code")

    assert result == {"id": "SM1", "status": "queued"}
    assert captured["url"].endswith("/Accounts/AC123/Messages.json")
    assert captured["data"]["To"] == "+61400000000"
    assert captured["auth"] == ("AC123", "token")


def test_verification_message_mentions_expiry():
    assert "123456" in twilio_sms_service.verification_message("123456")
    assert f"{settings.OTP_TTL_MINUTES} minutes" in twilio_sms_service.verification_message("123456")


# =============================================================================
# PEXA and Smokeball
# =============================================================================

def test_pexa_feed_sorted_newest_first():
    events = [
        {"id": 1, "timestamp": "2026-03-01T10:00:00Z"},
        {"id": 2, "timestamp": "2026-03-02T09:00:00Z"},
        {"id": 3, "timestamp": "2026-02-28T23:00:00Z"},
    ]
    assert [e["id"] for e in pexa_service.sort_feed(events)] == [2, 1, 3]


@pytest.mark.asyncio
async def test_pexa_feed_filters_workspace(monkeypatch):
    monkeypatch.setattr(settings, "PEXA_API_KEY", "key")

    async def fake_request(method, url, *, vendor, **kwargs):
        return _response(200, {"events": [
            {"workspaceId": "W1", "timestamp": "2026-03-01T00:00:00Z"},
            {"workspaceId": "W2", "timestamp": "2026-03-03T00:00:00Z"},
            {"workspaceId": "W1", "timestamp": "2026-03-02T00:00:00Z"},
        ]})

    monkeypatch.setattr(http_service, "send_vendor_request", fake_request)
    feed = await pexa_service.get_settlement_feed("W1")
    assert [e["timestamp"][:10] for e in feed] == ["2026-03-02", "2026-03-01"]


def test_smokeball_summary_extracts_key_dates():
    summary = smokeball_service.to_matter_summary({
        "id": "sb-1",
        "number": "2026/001",
        "keyDates": [
            {"name": "Settlement", "date": "2026-04-15"},
            {"name": "Cooling Off", "date": "2026-03-05"},
        ],
        "tasks": [{}, {}],
    })
    assert summary["settlementDate"] == "2026-04-15"
    assert summary["coolingOffDate"] == "2026-03-05"
    assert summary["financeDate"] is None
    assert summary["taskCount"] == 2
    assert summary["documentCount"] == 0


# =============================================================================
# Apple Maps
# =============================================================================

@pytest.fixture
def maps_key(monkeypatch):
    private_key = ec.generate_private_key(ec.SECP256R1())
    pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    monkeypatch.setattr(settings, "APPLE_MAPS_TEAM_ID", "TEAM123")
    monkeypatch.setattr(settings, "APPLE_MAPS_KEY_ID", "KEY123")
    monkeypatch.setattr(settings, "APPLE_MAPS_PRIVATE_KEY", pem.replace("\n", "\\n"))
    return private_key.public_key()


def test_maps_token_unconfigured():
    with pytest.raises(DependencyUnavailable):
        apple_maps_service.get_token()


def test_maps_token_is_signed_and_cached(maps_key):
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    token, expires_at = apple_maps_service.get_token(now)

    assert jwt.get_unverified_header(token)["kid"] == "KEY123"
    claims = jwt.decode(token, maps_key, algorithms=["ES256"], options={"verify_exp": False, "verify_iat": False})
    assert claims["iss"] == "TEAM123"
    assert expires_at == now + timedelta(hours=1)

    again, _ = apple_maps_service.get_token(now + timedelta(minutes=30))
    assert again == token


def test_maps_token_refreshed_near_expiry(maps_key):
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    token, _ = apple_maps_service.get_token(now)
    refreshed, expires_at = apple_maps_service.get_token(now + timedelta(minutes=59, seconds=30))
    assert refreshed != token
    assert expires_at > now + timedelta(hours=1)
