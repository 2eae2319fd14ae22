"""Auth Routes — registration, login, current user, and password change.

Invariants:
    - register → 201 with user + token; a duplicate email → 409 EMAIL_TAKEN
    - login failure is the same 401 for unknown email and wrong password
    - protected routes answer 401 for a missing, malformed, or orphaned token
"""

from uuid import uuid4

import pytest

from storefront.api.routes.auth import save_new_user
from storefront.config import get_settings
from storefront.core.errors import ConflictError
from storefront.infrastructure.security import create_access_token, decode_access_token
from storefront.models.user import User

PASSWORD = "hunter22"  # seller fixture password


async def test_register_creates_user_and_token(client):
    res = await client.post("/api/auth/register", json={
        "email": "  New@Example.com ", "password": "secret1", "fullName": "Nia New",
    })
    assert res.status_code == 201
    data = res.json()
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["full_name"] == "Nia New"
    assert "password_hash" not in data["user"]
    user_id = decode_access_token(data["token"], get_settings().jwt_secret)
    assert str(user_id) == data["user"]["id"]


async def test_register_duplicate_email_conflicts(client, seller):
    res = await client.post("/api/auth/register", json={
        "email": "SELLER@example.com", "password": "secret1",
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "EMAIL_TAKEN"


async def test_register_race_on_email_index_is_conflict(seller, test_db):
    # both requests passed the existence check; the unique index decides
    with pytest.raises(ConflictError) as exc_info:
        await save_new_user(test_db, User(email="seller@example.com", password_hash="x"))
    assert exc_info.value.code == "EMAIL_TAKEN"
    assert exc_info.value.http_status == 409


async def test_register_rejects_short_password(client):
    res = await client.post("/api/auth/register", json={
        "email": "a@b.co", "password": "123",
    })
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any("password" in d["field"] for d in error["details"])


async def test_login_returns_token(client, seller):
    res = await client.post("/api/auth/login", json={
        "email": "seller@example.com", "password": PASSWORD,
    })
    assert res.status_code == 200
    assert res.json()["user"]["id"] == str(seller.id)
    assert res.json()["token"]


async def test_login_failures_look_the_same(client, seller):
    wrong_password = await client.post("/api/auth/login", json={
        "email": "seller@example.com", "password": "nope-nope",
    })
    unknown_email = await client.post("/api/auth/login", json={
        "email": "nobody@example.com", "password": PASSWORD,
    })
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json()["error"]["message"] == unknown_email.json()["error"]["message"]


async def test_me_returns_current_user(client, seller, auth_headers):
    res = await client.get("/api/auth/me", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["user"]["email"] == "seller@example.com"


async def test_me_requires_token(client):
    res = await client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_me_rejects_garbage_token(client):
    res = await client.get("/api/auth/me", headers={"Authorization": "Bearer junk"})
    assert res.status_code == 401


async def test_me_rejects_token_for_deleted_user(client):
    token = create_access_token(uuid4(), get_settings().jwt_secret)
    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "User not found"


async def test_change_password(client, seller, auth_headers):
    res = await client.put("/api/auth/password", headers=auth_headers, json={
        "currentPassword": PASSWORD, "newPassword": "brand-new",
    })
    assert res.status_code == 200

    login = await client.post("/api/auth/login", json={
        "email": "seller@example.com", "password": "brand-new",
    })
    assert login.status_code == 200


async def test_change_password_needs_current_password(client, seller, auth_headers):
    res = await client.put("/api/auth/password", headers=auth_headers, json={
        "currentPassword": "not-it", "newPassword": "brand-new",
    })
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Current password is incorrect"
