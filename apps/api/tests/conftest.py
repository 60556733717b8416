"""
Test configuration and fixtures.

Provides:
- In-memory SQLite schema rebuilt for each test
- Users per role and bearer-token headers for them
- HTTPX AsyncClient bound to the app with the test session injected
"""
import os
import uuid
from typing import AsyncGenerator, Callable, Generator

# Must be set before app imports read settings
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["REDIS_URL"] = "memory://"
os.environ["ENV"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from app.main import app
from app.core.config import settings
from app.core.deps import get_db
from app.core.security import create_identity_token
from app.db.base import Base
from app.db.enums import Role
from app.db.models import Matter, User
from app.db.session import SessionLocal, engine
from app.services import apple_maps_service, chat_service


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test; app code is free to commit."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _reset_process_state():
    yield
    chat_service.clear_memory()
    apple_maps_service.clear_cache()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make(role: Role = Role.CLIENT, email: str | None = None, **fields) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            external_id=f"test|{suffix}",
            email=email or f"{role.value.lower()}-{suffix}@test.com",
            display_name=fields.pop("display_name", f"Test {role.value.title()}"),
            role=role.value,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def client_user(make_user) -> User:
    return make_user(Role.CLIENT, display_name="Casey Client")


@pytest.fixture
def broker_user(make_user) -> User:
    return make_user(Role.BROKER, display_name="Bailey Broker")


@pytest.fixture
def conveyancer_user(make_user) -> User:
    return make_user(Role.CONVEYANCER, display_name="Corey Conveyancer")


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user(Role.ADMIN, display_name="Avery Admin")


def _auth_headers(user: User) -> dict[str, str]:
    """Bearer header for a user, in the identity provider's token shape."""
    token = create_identity_token(user.external_id, user.email, user.display_name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def matter(db: Session, client_user: User, conveyancer_user: User, broker_user: User) -> Matter:
    """A matter owned by client_user and assigned to the conveyancer and broker."""
    matter = Matter(
        address="14 Bronte Road, Bondi Junction NSW 2022",
        client_user_id=client_user.id,
        conveyancer_user_id=conveyancer_user.id,
        broker_user_id=broker_user.id,
        status="Active",
    )
    db.add(matter)
    db.commit()
    db.refresh(matter)
    return matter


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against the app, sharing the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def enable_demo_login(monkeypatch):
    monkeypatch.setattr(settings, "DEMO_LOGIN_ENABLED", True)


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    return _auth_headers
