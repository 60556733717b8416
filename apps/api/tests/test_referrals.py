"""Tests for broker referrals and the public QR page."""
import uuid

import pytest
from httpx import AsyncClient

from app.db.enums import Role


async def _create_referral(client: AsyncClient, headers: dict, **fields) -> dict:
    payload = {"clientName": "Jordan Buyer", "clientEmail": "jordan@example.com",
               "propertyAddress": "3 Hill St, Paddington NSW 2021", "notes": "Pre-approved"}
    payload.update(fields)
    response = await client.post("/api/referrals", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_qr_lookup_unknown_token_is_404(client: AsyncClient):
    response = await client.get("/api/referrals/qr/does-not-exist")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_qr_referral_public_landing(client: AsyncClient, auth_headers, broker_user):
    referral = await _create_referral(client, auth_headers(broker_user), channel="QR")
    assert referral["qrToken"]

    response = await client.get(f"/api/referrals/qr/{referral['qrToken']}")
    assert response.status_code == 200
    data = response.json()
    assert data["referral"]["clientName"] == "Jordan Buyer"
    assert "notes" not in data["referral"]
    assert "clientEmail" not in data["referral"]
    assert data["broker"]["name"] == broker_user.display_name


@pytest.mark.asyncio
async def test_qr_issue_is_idempotent(client: AsyncClient, auth_headers, broker_user):
    headers = auth_headers(broker_user)
    referral = await _create_referral(client, headers)
    assert referral["qrToken"] is None

    first = await client.post(f"/api/referrals/{referral['id']}/qr", headers=headers)
    second = await client.post(f"/api/referrals/{referral['id']}/qr", headers=headers)
    assert first.json()["qrToken"]
    assert first.json()["qrToken"] == second.json()["qrToken"]


@pytest.mark.asyncio
async def test_update_cannot_change_qr_token(client: AsyncClient, auth_headers, broker_user):
    headers = auth_headers(broker_user)
    referral = await _create_referral(client, headers, channel="QR")

    response = await client.patch(
        f"/api/referrals/{referral['id']}",
        json={"qrToken": "hijacked", "notes": "Called back"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["qrToken"] == referral["qrToken"]
    assert response.json()["notes"] == "Called back"


@pytest.mark.asyncio
async def test_client_cannot_list_referrals(client: AsyncClient, auth_headers, client_user):
    response = await client.get("/api/referrals", headers=auth_headers(client_user))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_broker_sees_only_own(client: AsyncClient, auth_headers, broker_user, make_user, conveyancer_user):
    other_broker = make_user(Role.BROKER)
    await _create_referral(client, auth_headers(broker_user))
    await _create_referral(client, auth_headers(other_broker), clientName="Someone Else")

    mine = await client.get("/api/referrals", headers=auth_headers(broker_user))
    assert [r["clientName"] for r in mine.json()] == ["Jordan Buyer"]

    everything = await client.get("/api/referrals", headers=auth_headers(conveyancer_user))
    assert len(everything.json()) == 2


@pytest.mark.asyncio
async def test_convert_creates_matter(client: AsyncClient, auth_headers, broker_user, client_user):
    headers = auth_headers(broker_user)
    referral = await _create_referral(client, headers)

    response = await client.post(
        f"/api/referrals/{referral['id']}/convert",
        json={"clientUserId": str(client_user.id)},
        headers=headers,
    )
    assert response.status_code == 201
    matter = response.json()
    assert matter["address"] == "3 Hill St, Paddington NSW 2021"
    assert matter["referralId"] == referral["id"]
    assert matter["brokerUserId"] == str(broker_user.id)

    updated = await client.get(f"/api/referrals/{referral['id']}", headers=headers)
    assert updated.json()["status"] == "Converted"
    assert updated.json()["matterId"] == matter["id"]

    again = await client.post(
        f"/api/referrals/{referral['id']}/convert",
        json={"clientUserId": str(client_user.id)},
        headers=headers,
    )
    assert again.status_code == 400


@pytest.mark.asyncio
async def test_convert_with_unknown_conveyancer_is_400(client: AsyncClient, auth_headers, broker_user, client_user):
    headers = auth_headers(broker_user)
    referral = await _create_referral(client, headers)

    response = await client.post(
        f"/api/referrals/{referral['id']}/convert",
        json={"clientUserId": str(client_user.id), "conveyancerUserId": str(uuid.uuid4())},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["field"] == "conveyancerUserId"

    unchanged = await client.get(f"/api/referrals/{referral['id']}", headers=headers)
    assert unchanged.json()["status"] == "Pending"
