"""Auth API tests.

Learn: Tests cover:
1. User registration + duplicate prevention + validation
2. Login → JWT tokens
3. Token refresh
4. Protected routes reject missing / invalid tokens
"""

import uuid

import pytest

from carepoint.auth.jwt import create_access_token


def _user(**overrides):
    name = f"user-{uuid.uuid4().hex[:8]}"
    body = {
        "username": name,
        "password": "secret123",
        "fullName": "Test User",
        "email": f"{name}@example.com",
    }
    body.update(overrides)
    return body


async def _register_and_login(client, body=None):
    body = body or _user()
    r = await client.post("/api/auth/register", json=body)
    assert r.status_code == 201
    r = await client.post(
        "/api/auth/login",
        json={"username": body["username"], "password": body["password"]},
    )
    assert r.status_code == 200
    return r.json()


# ═══════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_user(unauthenticated_client):
    body = _user()
    r = await unauthenticated_client.post("/api/auth/register", json=body)
    assert r.status_code == 201
    user = r.json()
    assert user["username"] == body["username"]
    assert user["fullName"] == "Test User"
    assert "password" not in user
    assert "password_hash" not in user


@pytest.mark.asyncio
async def test_register_duplicate_username(unauthenticated_client):
    body = _user()
    r1 = await unauthenticated_client.post("/api/auth/register", json=body)
    assert r1.status_code == 201

    r2 = await unauthenticated_client.post("/api/auth/register", json=body)
    assert r2.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"password": "abc"}, {"email": "not-an-email"}, {"fullName": "A"}],
)
async def test_register_validation(unauthenticated_client, overrides):
    r = await unauthenticated_client.post("/api/auth/register", json=_user(**overrides))
    assert r.status_code == 422


# ═══════════════════════════════════════════════════════════
# Login + refresh
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(unauthenticated_client):
    tokens = await _register_and_login(unauthenticated_client)
    assert tokens["token_type"] == "bearer"
    assert tokens["access_token"]
    assert tokens["refresh_token"]


@pytest.mark.asyncio
async def test_login_wrong_password(unauthenticated_client):
    body = _user()
    await unauthenticated_client.post("/api/auth/register", json=body)
    r = await unauthenticated_client.post(
        "/api/auth/login",
        json={"username": body["username"], "password": "wrong-password"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_user(unauthenticated_client):
    r = await unauthenticated_client.post(
        "/api/auth/login", json={"username": "nobody", "password": "whatever"}
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_refresh_token(unauthenticated_client):
    tokens = await _register_and_login(unauthenticated_client)
    r = await unauthenticated_client.post(
        "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert r.status_code == 200
    assert "access_token" in r.json()


@pytest.mark.asyncio
async def test_refresh_with_access_token_fails(unauthenticated_client):
    tokens = await _register_and_login(unauthenticated_client)
    r = await unauthenticated_client.post(
        "/api/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# Protected routes
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(unauthenticated_client):
    body = _user()
    tokens = await _register_and_login(unauthenticated_client, body)
    r = await unauthenticated_client.get(
        "/api/auth/me",
        headers={"Authorization": f"Bearer {tokens['access_token']}"},
    )
    assert r.status_code == 200
    assert r.json()["username"] == body["username"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path",
    ["/api/auth/me", "/api/appointments", "/api/health-tip", "/api/water-intake"],
)
async def test_protected_routes_require_token(unauthenticated_client, path):
    r = await unauthenticated_client.get(path)
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_rejected(unauthenticated_client):
    r = await unauthenticated_client.get(
        "/api/appointments",
        headers={"Authorization": "Bearer invalid_token_here"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_unauthenticated_booking_touches_nothing(unauthenticated_client, app):
    r = await unauthenticated_client.post(
        "/api/appointments",
        json={"doctorId": 1, "date": "2099-01-01T10:00:00Z", "reason": "checkup"},
    )
    assert r.status_code == 401
    assert await app.state.store.get_user_appointments(1) == []
    assert app.state.dispatcher.stats.dropped == 0


@pytest.mark.asyncio
async def test_me_for_deleted_user_is_404(unauthenticated_client):
    """A valid token whose user is not in the (fresh) store."""
    token = create_access_token(12345)
    r = await unauthenticated_client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert r.status_code == 404
