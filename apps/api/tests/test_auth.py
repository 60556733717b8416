"""Tests for identity, provisioning, profile, onboarding and demo login."""
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.core.security import create_identity_token
from app.db.models import User
from app.services import demo_service


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


@pytest.mark.asyncio
async def test_me_rejects_expired_token(client: AsyncClient, db):
    token = create_identity_token("idp|expired", "late@example.com", expires_hours=-1)
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Session expired"


@pytest.mark.asyncio
async def test_me_rejects_wrong_audience(client: AsyncClient, db):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "idp|x", "email": "x@example.com", "aud": "other", "exp": now + timedelta(hours=1)},
        settings.IDENTITY_JWT_SECRET,
        algorithm="HS256",
    )
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_first_request_provisions_client(client: AsyncClient, db):
    token = create_identity_token("idp|new-user", "New.User@Example.com", "New User")
    headers = {"Authorization": f"Bearer {token}"}

    first = await client.get("/api/auth/me", headers=headers)
    assert first.status_code == 200
    data = first.json()
    assert data["email"] == "new.user@example.com"
    assert data["displayName"] == "New User"
    assert data["role"] == "CLIENT"
    assert data["voiStatus"] == "not_started"
    assert "externalId" not in data

    second = await client.get("/api/auth/me", headers=headers)
    assert second.json()["id"] == data["id"]
    assert db.query(User).count() == 1


@pytest.mark.asyncio
async def test_previous_secret_still_accepted(client: AsyncClient, db, monkeypatch):
    token = create_identity_token("idp|rotated", "rotated@example.com")
    monkeypatch.setattr(settings, "IDENTITY_JWT_SECRET_PREVIOUS", settings.IDENTITY_JWT_SECRET)
    monkeypatch.setattr(settings, "IDENTITY_JWT_SECRET", "a-brand-new-secret")
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_onboarding_rejects_unknown_fields(client: AsyncClient, auth_headers, client_user):
    response = await client.patch(
        "/api/auth/onboarding",
        json={"phone": "0400 000 000", "role": "ADMIN"},
        headers=auth_headers(client_user),
    )
    assert response.status_code == 400
    assert response.json()["field"] == "role"


@pytest.mark.asyncio
async def test_onboarding_ignores_client_verified_status(client: AsyncClient, auth_headers, client_user):
    response = await client.patch(
        "/api/auth/onboarding",
        json={"onboardingStep": 3, "voiStatus": "verified", "address": "1 George St"},
        headers=auth_headers(client_user),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["voiStatus"] == "not_started"
    assert data["onboardingStep"] == 3
    assert data["address"] == "1 George St"


@pytest.mark.asyncio
async def test_onboarding_negative_step_is_400(client: AsyncClient, auth_headers, client_user):
    response = await client.patch(
        "/api/auth/onboarding", json={"onboardingStep": -1}, headers=auth_headers(client_user)
    )
    assert response.status_code == 400
    assert response.json()["field"] == "onboardingStep"


@pytest.mark.asyncio
async def test_onboarding_nulls_leave_required_fields_unchanged(client: AsyncClient, auth_headers, client_user):
    headers = auth_headers(client_user)
    await client.patch("/api/auth/onboarding", json={"onboardingStep": 2}, headers=headers)

    response = await client.patch(
        "/api/auth/onboarding",
        json={"onboardingStep": None, "onboardingComplete": None, "voiStatus": None, "phone": None},
        headers=headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["onboardingStep"] == 2
    assert data["onboardingComplete"] is False
    assert data["voiStatus"] == "not_started"
    assert data["phone"] is None


@pytest.mark.asyncio
async def test_profile_cannot_self_assign_admin(client: AsyncClient, auth_headers, client_user):
    response = await client.post(
        "/api/auth/profile", json={"role": "ADMIN"}, headers=auth_headers(client_user)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_profile_role_choice_during_onboarding(client: AsyncClient, auth_headers, client_user):
    response = await client.post(
        "/api/auth/profile",
        json={"role": "BROKER", "displayName": "Casey B"},
        headers=auth_headers(client_user),
    )
    assert response.status_code == 200
    assert response.json()["role"] == "BROKER"
    assert response.json()["displayName"] == "Casey B"


@pytest.mark.asyncio
async def test_profile_role_locked_after_onboarding(client: AsyncClient, auth_headers, make_user):
    user = make_user(onboarding_complete=True)
    response = await client.post(
        "/api/auth/profile", json={"role": "BROKER"}, headers=auth_headers(user)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_demo_login_disabled_is_404(client: AsyncClient):
    response = await client.post(
        "/api/auth/demo-login", json={"email": demo_service.DEMO_BUYER_EMAIL}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_demo_login_rejects_other_emails(client: AsyncClient, enable_demo_login):
    response = await client.post("/api/auth/demo-login", json={"email": "someone@example.com"})
    assert response.status_code == 400
    assert response.json()["field"] == "email"


@pytest.mark.asyncio
async def test_demo_login_buyer_gets_seeded_matter(client: AsyncClient, enable_demo_login):
    response = await client.post(
        "/api/auth/demo-login", json={"email": demo_service.DEMO_BUYER_EMAIL}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["role"] == "CLIENT"

    headers = {"Authorization": f"Bearer {data['token']}"}
    me = await client.get("/api/auth/me", headers=headers)
    assert me.json()["id"] == data["user"]["id"]

    matters = await client.get("/api/matters", headers=headers)
    assert [m["address"] for m in matters.json()] == [demo_service.DEMO_MATTER_ADDRESS]


@pytest.mark.asyncio
async def test_demo_login_staff_account_is_onboarded(client: AsyncClient, enable_demo_login):
    response = await client.post(
        "/api/auth/demo-login", json={"email": demo_service.DEMO_BROKER_EMAIL}
    )
    user = response.json()["user"]
    assert user["role"] == "BROKER"
    assert user["onboardingComplete"] is True


def test_seed_is_idempotent(db):
    first = demo_service.seed_demo_data(db)
    second = demo_service.seed_demo_data(db)
    assert first["status"] == "seeded"
    assert second["status"] == "already_seeded"
    assert first["matter_id"] == second["matter_id"]
