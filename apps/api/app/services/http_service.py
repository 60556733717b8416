"""Single-shot vendor HTTP calls.

Adapters make exactly one request per operation: no retries, a fixed timeout,
and vendor failures mapped to ExternalServiceError with the body logged only.
"""

from __future__ import annotations

import logging

import httpx

from app.core.config import settings
from app.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

MAX_LOGGED_BODY = 500


async def send_vendor_request(
    method: str,
    url: str,
    *,
    vendor: str,
    **kwargs,
) -> httpx.Response:
    """Perform one request and return the 2xx response, else raise."""
    try:
        async with httpx.AsyncClient(timeout=settings.VENDOR_TIMEOUT_SECONDS) as client:
            response = await client.request(method, url, **kwargs)
    except httpx.RequestError as exc:
        logger.warning("%s request failed: %s", vendor, exc.__class__.__name__)
        raise ExternalServiceError(f"{vendor} is unreachable") from exc

    if response.status_code >= 400:
        logger.warning(
            "%s returned %s: %s",
            vendor,
            response.status_code,
            response.text[:MAX_LOGGED_BODY],
        )
        raise ExternalServiceError(f"{vendor} request failed")
    return response
