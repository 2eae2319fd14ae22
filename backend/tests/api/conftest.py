"""API test fixtures — FastAPI test client over an in-memory DB and a mock CJ backend.

Invariants:
    - get_db dependency overridden to use the test DB session factory
    - get_cj_client overridden with a ResilientCJClient on httpx.MockTransport
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - One bcrypt hash per test session: hashing dominates test time otherwise
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache

import pytest
from httpx import ASGITransport, AsyncClient

import storefront.infrastructure.database as db_module
from storefront.config import get_settings
from storefront.infrastructure.cj_client import get_cj_client
from storefront.infrastructure.database import DatabaseSessionManager, get_db
from storefront.infrastructure.security import create_access_token, hash_password
from storefront.main import app
from storefront.models.cj_credential import CjCredential
from storefront.models.user import User

from tests.mock_cj import MockCJ, make_cj_client

PASSWORD = "hunter22"


@lru_cache
def _password_hash() -> str:
    return hash_password(PASSWORD)


@pytest.fixture
def mock_cj():
    return MockCJ()


@pytest.fixture
async def cj_client(mock_cj):
    client = make_cj_client(mock_cj)
    yield client
    await client.aclose()


@pytest.fixture
async def client(test_engine, test_session_factory, cj_client):
    """FastAPI test client with DB and CJ dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cj_client] = lambda: cj_client

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _create_user(db, email: str, full_name: str | None = None) -> User:
    user = User(email=email, password_hash=_password_hash(), full_name=full_name)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    settings = get_settings()
    token = create_access_token(user.id, settings.jwt_secret, settings.jwt_algorithm)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def seller(test_db):
    return await _create_user(test_db, "seller@example.com", "Sam Seller")


@pytest.fixture
def auth_headers(seller):
    return _headers_for(seller)


@pytest.fixture
async def other_seller(test_db):
    return await _create_user(test_db, "rival@example.com")


@pytest.fixture
def other_headers(other_seller):
    return _headers_for(other_seller)


@pytest.fixture
async def connected(test_db, seller):
    """Give the seller a CJ key with a valid cached token."""
    credential = CjCredential(
        user_id=seller.id,
        api_key="key-good",
        access_token="tok-1",
        token_expires_at=datetime.now(timezone.utc) + timedelta(days=1),
    )
    test_db.add(credential)
    await test_db.commit()
    return credential
