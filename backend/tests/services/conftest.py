"""Service test fixtures — a persisted user and a CJ client over the mock backend."""

import pytest

from storefront.models.user import User

from tests.mock_cj import MockCJ, make_cj_client


@pytest.fixture
async def user(test_db):
    user = User(email="svc@example.com", password_hash="x")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
def mock_cj():
    return MockCJ()


@pytest.fixture
async def cj_client(mock_cj):
    client = make_cj_client(mock_cj)
    yield client
    await client.aclose()
