"""Tests for per-matter chat."""
import pytest
from httpx import AsyncClient

from app.db.enums import Role


@pytest.mark.asyncio
async def test_post_and_list_messages(client: AsyncClient, auth_headers, matter, client_user, conveyancer_user):
    posted = await client.post(
        f"/api/chat/{matter.id}",
        json={"text": "Has the bank confirmed the valuation?"},
        headers=auth_headers(client_user),
    )
    assert posted.status_code == 201
    assert posted.json()["senderName"] == "Casey Client"

    await client.post(
        f"/api/chat/{matter.id}",
        json={"text": "Yes, it came through this morning."},
        headers=auth_headers(conveyancer_user),
    )
    thread = await client.get(f"/api/chat/{matter.id}", headers=auth_headers(client_user))
    assert [m["senderName"] for m in thread.json()] == ["Casey Client", "Corey Conveyancer"]


@pytest.mark.asyncio
async def test_outsider_gets_404(client: AsyncClient, auth_headers, matter, make_user):
    outsider = make_user(Role.CLIENT)
    response = await client.get(f"/api/chat/{matter.id}", headers=auth_headers(outsider))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_empty_message_is_400(client: AsyncClient, auth_headers, matter, client_user):
    response = await client.post(
        f"/api/chat/{matter.id}", json={"text": ""}, headers=auth_headers(client_user)
    )
    assert response.status_code == 400
    assert response.json()["field"] == "text"
