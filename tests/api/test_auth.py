"""Tests for auth endpoints: login, register, refresh, me and logout."""

import logging

import pytest
from httpx import AsyncClient

from wastems.infrastructure.security.jwt import create_access_token, verify_token


async def test_admin_login_returns_token_pair(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "admin@wastems.com", "password": "admin123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["user"]["role"] == "admin"
    assert data["user"]["id"] == "admin"
    assert "password" not in data["user"]
    claims = verify_token(data["token"])
    assert claims["sub"] == "admin"
    assert claims["role"] == "admin"
    assert verify_token(data["refreshToken"])["id"] == "admin"


async def test_login_wrong_password_returns_401(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "admin@wastems.com", "password": "wrong-password"}
    )
    assert response.status_code == 401
    body = response.json()
    assert body["error"]["code"] == "UNAUTHORIZED"
    assert body["error"]["message"] == "Invalid credentials"


async def test_login_unknown_email_same_message_as_wrong_password(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "whatever"}
    )
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid credentials"


async def test_login_invalid_body_returns_400(client: AsyncClient) -> None:
    """Request validation errors use 400 VALIDATION_ERROR, not 422."""
    response = await client.post("/api/auth/login", json={"email": "not-an-email"})
    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert isinstance(body["error"]["details"], list)


async def test_login_deactivated_account_returns_401(client: AsyncClient, store, make_user) -> None:
    user_id, _ = await make_user("supervisor")
    await store.collection("users").document(user_id).update({"isActive": False})
    response = await client.post(
        "/api/auth/login", json={"email": "supervisor@example.com", "password": "secret123"}
    )
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Account is deactivated"


async def test_register_creates_user_with_role_permissions(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={
            "name": "Asha Patil",
            "email": "Asha@Example.com",
            "password": "secret123",
            "role": "ulb_admin",
        },
    )
    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "asha@example.com"
    assert user["role"] == "ulb_admin"
    assert "analytics" in user["permissions"]


async def test_register_admin_role_is_allowed_but_logged(
    client: AsyncClient, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="wastems.api.endpoints.auth")
    response = await client.post(
        "/api/auth/register",
        json={"name": "Self Made", "email": "boss@example.com", "password": "secret123", "role": "admin"},
    )
    assert response.status_code == 201
    user_id = response.json()["user"]["id"]
    assert any(
        r.levelno == logging.WARNING and user_id in r.getMessage() for r in caplog.records
    )

    caplog.clear()
    citizen = await client.post(
        "/api/auth/register",
        json={"name": "Asha Patil", "email": "asha@example.com", "password": "secret123", "role": "citizen"},
    )
    assert citizen.status_code == 201
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


async def test_register_duplicate_email_returns_400(client: AsyncClient) -> None:
    payload = {
        "name": "Asha Patil",
        "email": "asha@example.com",
        "password": "secret123",
        "role": "citizen",
    }
    assert (await client.post("/api/auth/register", json=payload)).status_code == 201
    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "User already exists with this email"


async def test_register_unknown_role_returns_400(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        json={"name": "X Y", "email": "x@example.com", "password": "secret123", "role": "root"},
    )
    assert response.status_code == 400


async def test_refresh_issues_new_pair(client: AsyncClient) -> None:
    login = await client.post(
        "/api/auth/login", json={"email": "admin@wastems.com", "password": "admin123"}
    )
    refresh_token = login.json()["refreshToken"]
    response = await client.post("/api/auth/refresh", json={"refreshToken": refresh_token})
    assert response.status_code == 200
    assert verify_token(response.json()["token"])["sub"] == "admin"


async def test_refresh_without_token_returns_400(client: AsyncClient) -> None:
    response = await client.post("/api/auth/refresh", json={})
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Refresh token required"


async def test_refresh_with_garbage_returns_401(client: AsyncClient) -> None:
    response = await client.post("/api/auth/refresh", json={"refreshToken": "not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid refresh token"


async def test_me_returns_current_user(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.get("/api/auth/me", headers=admin_headers)
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == "admin"
    assert user["email"] == "admin@wastems.com"


async def test_me_with_token_for_unknown_user_returns_401(client: AsyncClient) -> None:
    token = create_access_token({"sub": "ghost", "id": "ghost", "role": "admin"})
    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Not authorized, token failed"


async def test_logout(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.post("/api/auth/logout", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True
