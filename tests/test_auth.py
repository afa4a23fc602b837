"""
Tests for authentication endpoints: registration, login, logout and session.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from tigertix.core.security import create_access_token


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns the user, a token and a session cookie."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "New@Example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Registration successful"
    assert data["user"]["email"] == "new@example.com"
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert "password_hash" not in data["user"]
    assert "tt_auth_token" in response.cookies


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Duplicate email returns 409."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "TEST@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_short_password(client: AsyncClient):
    """Password below minimum length returns 422."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "short@example.com",
        "password": "short",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={
        "email": "not-an-email",
        "password": "securepassword123",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return a JWT token."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["user"]["id"] == test_user.id
    assert data["token"]
    assert "tt_auth_token" in response.cookies


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    """Wrong password returns 401."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_login_unknown_user(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "whatever123",
    })
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


@pytest.mark.asyncio
async def test_me(client: AsyncClient, auth_headers, test_user):
    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"id": test_user.id, "email": "test@example.com"}


@pytest.mark.asyncio
async def test_me_unauthenticated(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_expired_token(client: AsyncClient, test_user):
    token = create_access_token(data={"sub": str(test_user.id)}, expires_delta=timedelta(minutes=-1))
    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_tampered_token(client: AsyncClient, auth_headers):
    headers = {"Authorization": auth_headers["Authorization"] + "x"}
    response = await client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(client: AsyncClient, test_user):
    await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert (await client.get("/api/v1/auth/me")).status_code == 200

    response = await client.post("/api/v1/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}

    assert (await client.get("/api/v1/auth/me")).status_code == 401
