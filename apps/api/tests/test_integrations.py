"""Tests for integration endpoints."""
from datetime import date

import pytest
from httpx import AsyncClient

from app.services import pexa_service, smokeball_service


@pytest.mark.asyncio
async def test_service_status_without_credentials(client: AsyncClient, auth_headers, client_user):
    response = await client.get("/api/services/status", headers=auth_headers(client_user))
    assert response.json() == {
        "email": False,
        "sms": False,
        "verification": False,
        "maps": False,
        "smokeball": False,
        "pexa": False,
    }


@pytest.mark.asyncio
async def test_maps_token_unconfigured_is_503(client: AsyncClient, auth_headers, client_user):
    response = await client.get("/api/maps/token", headers=auth_headers(client_user))
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_smokeball_sync_copies_key_dates(client: AsyncClient, auth_headers, db, matter, conveyancer_user, monkeypatch):
    matter.smokeball_matter_id = "sb-4471"
    db.commit()

    async def fake_get_matter(smokeball_matter_id):
        assert smokeball_matter_id == "sb-4471"
        return {
            "id": "sb-4471",
            "settlementDate": "2026-12-04T00:00:00Z",
            "coolingOffDate": None,
            "financeDate": "2026-11-20",
        }

    monkeypatch.setattr(smokeball_service, "get_matter", fake_get_matter)
    response = await client.post(
        f"/api/smokeball/sync/{matter.id}", headers=auth_headers(conveyancer_user)
    )
    assert response.status_code == 200
    assert response.json()["settlementDate"] == "2026-12-04"
    db.refresh(matter)
    assert matter.finance_date == date(2026, 11, 20)


@pytest.mark.asyncio
async def test_smokeball_sync_requires_link(client: AsyncClient, auth_headers, matter, conveyancer_user):
    response = await client.post(
        f"/api/smokeball/sync/{matter.id}", headers=auth_headers(conveyancer_user)
    )
    assert response.status_code == 400
    assert response.json()["field"] == "smokeballMatterId"


@pytest.mark.asyncio
async def test_client_cannot_use_smokeball(client: AsyncClient, auth_headers, client_user):
    response = await client.get("/api/smokeball/matters", headers=auth_headers(client_user))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_pexa_feed_passthrough(client: AsyncClient, auth_headers, conveyancer_user, monkeypatch):
    async def fake_feed(workspace_id=None):
        return [{"workspaceId": workspace_id, "event": "Lodged"}]

    monkeypatch.setattr(pexa_service, "get_settlement_feed", fake_feed)
    response = await client.get(
        "/api/pexa/feed", params={"workspaceId": "PX-1"}, headers=auth_headers(conveyancer_user)
    )
    assert response.json() == [{"workspaceId": "PX-1", "event": "Lodged"}]
