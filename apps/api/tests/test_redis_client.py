import pytest

from app.core import redis_client
from app.core.config import settings


@pytest.fixture(autouse=True)
def _fresh_client():
    redis_client.reset_redis_client()
    yield
    redis_client.reset_redis_client()


@pytest.mark.parametrize("url", ["", "memory://", " MEMORY:// "])
def test_disabled_urls(monkeypatch, url):
    monkeypatch.setattr(settings, "REDIS_URL", url)
    assert redis_client.get_redis_url() is None
    assert redis_client.get_sync_redis_client() is None


def test_client_is_pooled_and_cached(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setattr(settings, "REDIS_MAX_CONNECTIONS", 7)
    client = redis_client.get_sync_redis_client()
    assert client.connection_pool.max_connections == 7
    assert redis_client.get_sync_redis_client() is client
