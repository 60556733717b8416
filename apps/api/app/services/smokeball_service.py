"""Smokeball practice-management adapter."""

from __future__ import annotations

from app.core.config import settings
from app.core.errors import DependencyUnavailable
from app.services import http_service

VENDOR = "Smokeball"


def is_configured() -> bool:
    return bool(settings.SMOKEBALL_API_KEY)


def _headers() -> dict[str, str]:
    return {"x-api-key": settings.SMOKEBALL_API_KEY, "Accept": "application/json"}


def _key_date(key_dates: list[dict], name: str) -> str | None:
    for item in key_dates or []:
        if (item.get("name") or "").lower() == name:
            return item.get("date")
    return None


def to_matter_summary(raw: dict) -> dict:
    """Reshape a Smokeball matter into the fields we sync."""
    key_dates = raw.get("keyDates") or []
    return {
        "id": raw.get("id"),
        "number": raw.get("number"),
        "clientName": raw.get("clientName"),
        "propertyAddress": raw.get("propertyAddress"),
        "status": raw.get("status"),
        "settlementDate": _key_date(key_dates, "settlement"),
        "coolingOffDate": _key_date(key_dates, "cooling off"),
        "financeDate": _key_date(key_dates, "finance"),
        "taskCount": len(raw.get("tasks") or []),
        "documentCount": len(raw.get("documents") or []),
    }


async def list_matters() -> list[dict]:
    if not is_configured():
        raise DependencyUnavailable("Smokeball not configured")

    response = await http_service.send_vendor_request(
        "GET", f"{settings.SMOKEBALL_BASE_URL}/matters", vendor=VENDOR, headers=_headers()
    )
    data = response.json()
    items = data.get("value", []) if isinstance(data, dict) else data
    return [to_matter_summary(item) for item in items]


async def get_matter(smokeball_matter_id: str) -> dict:
    if not is_configured():
        raise DependencyUnavailable("Smokeball not configured")

    response = await http_service.send_vendor_request(
        "GET",
        f"{settings.SMOKEBALL_BASE_URL}/matters/{smokeball_matter_id}",
        vendor=VENDOR,
        headers=_headers(),
    )
    return to_matter_summary(response.json())
