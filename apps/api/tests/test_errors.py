"""Tests for error rendering."""
import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.deps import get_db
from app.core.errors import register_exception_handlers
from app.main import app
from app.services import playbook_service


@pytest.mark.asyncio
async def test_unknown_route_has_message(client: AsyncClient):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


@pytest.mark.asyncio
async def test_unhandled_error_hides_detail(db, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("connection string postgres://secret")

    monkeypatch.setattr(playbook_service, "list_articles", boom)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.get("/api/playbook")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_rate_limit_uses_message_shape():
    limited_app = FastAPI()
    limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")
    limited_app.state.limiter = limiter
    register_exception_handlers(limited_app)

    @limited_app.get("/ping")
    @limiter.limit("1/minute")
    async def ping(request: Request):
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=limited_app), base_url="http://test") as c:
        assert (await c.get("/ping")).status_code == 200
        response = await c.get("/ping")

    assert response.status_code == 429
    assert set(response.json()) == {"message"}
    assert response.json()["message"].startswith("Rate limit exceeded")
