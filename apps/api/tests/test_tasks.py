"""Tests for tasks."""
import uuid

import pytest
from httpx import AsyncClient

from app.db.enums import Role


@pytest.mark.asyncio
async def test_create_and_complete_task(client: AsyncClient, auth_headers, matter, conveyancer_user):
    headers = auth_headers(conveyancer_user)
    response = await client.post(
        "/api/tasks",
        json={"matterId": str(matter.id), "title": "Order building inspection", "pillar": "pillarConditions"},
        headers=headers,
    )
    assert response.status_code == 201
    task = response.json()
    assert task["status"] == "PENDING"
    assert task["completedAt"] is None

    response = await client.patch(
        f"/api/tasks/{task['id']}", json={"status": "COMPLETE"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["completedAt"] is not None

    response = await client.patch(
        f"/api/tasks/{task['id']}", json={"status": "IN_REVIEW"}, headers=headers
    )
    assert response.json()["completedAt"] is None


@pytest.mark.asyncio
async def test_invalid_task_status_is_400(client: AsyncClient, auth_headers, matter, conveyancer_user):
    response = await client.post(
        "/api/tasks",
        json={"matterId": str(matter.id), "title": "Sign contract", "status": "DONE"},
        headers=auth_headers(conveyancer_user),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["field"] == "status"
    assert body["message"].startswith("status:")


@pytest.mark.asyncio
async def test_matter_tasks_listing(client: AsyncClient, auth_headers, matter, client_user, conveyancer_user):
    await client.post(
        "/api/tasks",
        json={"matterId": str(matter.id), "title": "Upload ID"},
        headers=auth_headers(conveyancer_user),
    )
    response = await client.get(f"/api/matters/{matter.id}/tasks", headers=auth_headers(client_user))
    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["Upload ID"]


@pytest.mark.asyncio
async def test_task_on_invisible_matter_is_404(client: AsyncClient, auth_headers, matter, make_user):
    stranger = make_user(Role.CONVEYANCER)
    response = await client.post(
        "/api/tasks",
        json={"matterId": str(matter.id), "title": "Nope"},
        headers=auth_headers(stranger),
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unknown_assignee_is_400(client: AsyncClient, auth_headers, matter, conveyancer_user):
    headers = auth_headers(conveyancer_user)
    response = await client.post(
        "/api/tasks",
        json={"matterId": str(matter.id), "title": "Sign contract", "assignedToUserId": str(uuid.uuid4())},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["field"] == "assignedToUserId"

    created = await client.post(
        "/api/tasks", json={"matterId": str(matter.id), "title": "Sign contract"}, headers=headers
    )
    patched = await client.patch(
        f"/api/tasks/{created.json()['id']}",
        json={"assignedToUserId": str(uuid.uuid4())},
        headers=headers,
    )
    assert patched.status_code == 400
    assert patched.json()["field"] == "assignedToUserId"


@pytest.mark.asyncio
async def test_assign_task_to_client(client: AsyncClient, auth_headers, matter, conveyancer_user, client_user):
    response = await client.post(
        "/api/tasks",
        json={"matterId": str(matter.id), "title": "Upload ID", "assignedToUserId": str(client_user.id)},
        headers=auth_headers(conveyancer_user),
    )
    assert response.status_code == 201
    assert response.json()["assignedToUserId"] == str(client_user.id)
