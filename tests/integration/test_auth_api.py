"""Integration tests for the authentication endpoints."""

import pytest
from httpx import AsyncClient

REGISTER_PAYLOAD = {
    "username": "alice",
    "password": "Password123!",
    "email": "alice@example.com",
}


async def _register(client: AsyncClient) -> dict:
    response = await client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_register_returns_token_pair(client: AsyncClient):
    body = await _register(client)

    assert body["token_type"] == "Bearer"
    assert body["username"] == "alice"
    assert body["roles"] == ["ROLE_USER"]
    assert body["expires_in"] == 1800
    assert body["access_token"]
    assert body["refresh_token"]


@pytest.mark.asyncio
async def test_register_duplicate_username_conflicts(client: AsyncClient):
    await _register(client)

    response = await client.post(
        "/api/auth/register",
        json={**REGISTER_PAYLOAD, "email": "other@example.com"},
    )

    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"
    assert response.json()["field"] == "username"


@pytest.mark.asyncio
async def test_register_invalid_email(client: AsyncClient):
    response = await client.post(
        "/api/auth/register", json={**REGISTER_PAYLOAD, "email": "not-an-email"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login(client: AsyncClient):
    await _register(client)

    response = await client.post(
        "/api/auth/login", json={"username": "alice", "password": "Password123!"}
    )

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {
        "access_token",
        "refresh_token",
        "token_type",
        "expires_in",
        "username",
        "roles",
    }
    assert body["roles"] == ["ROLE_USER"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username,password",
    [("alice", "wrong-password"), ("nobody", "Password123!")],
)
async def test_login_failures_are_generic(client: AsyncClient, username, password):
    await _register(client)

    response = await client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )

    assert response.status_code == 401
    assert response.json() == {
        "error": "Authentication failed",
        "message": "Invalid username or password",
    }


@pytest.mark.asyncio
async def test_refresh_rotates_and_old_token_is_rejected(client: AsyncClient):
    tokens = await _register(client)

    response = await client.post(
        "/api/auth/refresh", json={"refreshToken": tokens["refresh_token"]}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "Bearer"
    assert body["expiresIn"] == 1800
    assert body["refreshToken"] != tokens["refresh_token"]

    reuse = await client.post(
        "/api/auth/refresh", json={"refreshToken": tokens["refresh_token"]}
    )
    assert reuse.status_code == 401

    again = await client.post("/api/auth/refresh", json={"refreshToken": body["refreshToken"]})
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_refresh_with_access_token_fails(client: AsyncClient):
    tokens = await _register(client)

    response = await client.post(
        "/api/auth/refresh", json={"refreshToken": tokens["access_token"]}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_validate(client: AsyncClient):
    tokens = await _register(client)

    valid = await client.post("/api/auth/validate", json={"token": tokens["access_token"]})
    assert valid.status_code == 200
    body = valid.json()
    assert body["valid"] is True
    assert body["username"] == "alice"
    assert body["roles"] == ["USER"]
    assert 0 < body["expiresIn"] <= 1800

    invalid = await client.post("/api/auth/validate", json={"token": "garbage"})
    assert invalid.json() == {"valid": False, "expiresIn": 0, "username": None, "roles": []}


@pytest.mark.asyncio
async def test_logout_revokes_both_tokens(client: AsyncClient):
    tokens = await _register(client)
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    before = await client.get("/api/credentials", headers=headers)
    assert before.status_code == 200

    response = await client.post(
        "/api/auth/logout",
        headers=headers,
        json={"refreshToken": tokens["refresh_token"]},
    )
    assert response.status_code == 204

    after = await client.get("/api/credentials", headers=headers)
    assert after.status_code == 401
    assert after.json() == {"detail": "Could not validate credentials"}

    refresh = await client.post(
        "/api/auth/refresh", json={"refreshToken": tokens["refresh_token"]}
    )
    assert refresh.status_code == 401

    validate = await client.post("/api/auth/validate", json={"token": tokens["access_token"]})
    assert validate.json()["valid"] is False


@pytest.mark.asyncio
async def test_logout_without_body(client: AsyncClient):
    tokens = await _register(client)

    response = await client.post(
        "/api/auth/logout",
        headers={"Authorization": f"Bearer {tokens['access_token']}"},
    )
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_logout_requires_bearer_token(client: AsyncClient):
    missing = await client.post("/api/auth/logout")
    assert missing.status_code == 401

    invalid = await client.post(
        "/api/auth/logout", headers={"Authorization": "Bearer not-a-token"}
    )
    assert invalid.status_code == 401
