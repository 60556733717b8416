"""Shared Redis connection for chat storage and rate limiting."""

from __future__ import annotations

import redis

from app.core.config import settings

MEMORY_URL = "memory://"
CONNECT_TIMEOUT_SECONDS = 2.0
SOCKET_TIMEOUT_SECONDS = 2.0
HEALTH_CHECK_SECONDS = 30

_client: redis.Redis | None = None


def get_redis_url() -> str | None:
    """REDIS_URL, or None when Redis is switched off."""
    url = (settings.REDIS_URL or "").strip()
    if not url or url.lower() == MEMORY_URL:
        return None
    return url


def get_sync_redis_client() -> redis.Redis | None:
    global _client
    url = get_redis_url()
    if not url:
        return None
    if _client is None:
        pool = redis.ConnectionPool.from_url(
            url,
            max_connections=max(settings.REDIS_MAX_CONNECTIONS, 1),
            socket_connect_timeout=CONNECT_TIMEOUT_SECONDS,
            socket_timeout=SOCKET_TIMEOUT_SECONDS,
            health_check_interval=HEALTH_CHECK_SECONDS,
            retry_on_timeout=True,
            decode_responses=True,
        )
        _client = redis.Redis(connection_pool=pool)
    return _client


def reset_redis_client() -> None:
    global _client
    _client = None
