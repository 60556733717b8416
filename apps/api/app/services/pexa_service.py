"""PEXA settlement-network adapter."""

from __future__ import annotations

from app.core.config import settings
from app.core.errors import DependencyUnavailable
from app.services import http_service

VENDOR = "PEXA"


def is_configured() -> bool:
    return bool(settings.PEXA_API_KEY)


def _headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {settings.PEXA_API_KEY}", "Accept": "application/json"}


async def get_workspace(workspace_id: str) -> dict:
    if not is_configured():
        raise DependencyUnavailable("PEXA not configured")

    response = await http_service.send_vendor_request(
        "GET",
        f"{settings.PEXA_BASE_URL}/workspaces/{workspace_id}",
        vendor=VENDOR,
        headers=_headers(),
    )
    raw = response.json()
    return {
        "id": raw.get("workspaceId", workspace_id),
        "status": raw.get("status"),
        "settlementDate": raw.get("settlementDate"),
        "jurisdiction": raw.get("jurisdiction"),
        "participants": raw.get("participants", []),
    }


def sort_feed(events: list[dict]) -> list[dict]:
    """Newest first. ISO-8601 timestamps sort lexically."""
    return sorted(events, key=lambda e: e.get("timestamp") or "", reverse=True)


async def get_settlement_feed(workspace_id: str | None = None) -> list[dict]:
    if not is_configured():
        raise DependencyUnavailable("PEXA not configured")

    params = {"workspaceId": workspace_id} if workspace_id else None
    response = await http_service.send_vendor_request(
        "GET",
        f"{settings.PEXA_BASE_URL}/settlement-feed",
        vendor=VENDOR,
        headers=_headers(),
        params=params,
    )
    data = response.json()
    events = data.get("events", []) if isinstance(data, dict) else data
    if workspace_id:
        events = [e for e in events if e.get("workspaceId") == workspace_id]
    return sort_feed(events)
