"""
Tests for authentication endpoints: registration, login and profile.
"""

import pytest
from httpx import AsyncClient

from deskbook.services import auth_service


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns the user wrapped in the envelope."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "New User",
        "email": "new@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["email"] == "new@example.com"
    assert body["data"]["role"] == "USER"
    assert "hashed_password" not in body["data"]


@pytest.mark.asyncio
async def test_register_cannot_choose_role(client: AsyncClient):
    """A role in the payload is ignored; registration always yields USER."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Sneaky",
        "email": "sneaky@example.com",
        "password": "securepassword123",
        "role": "ADMIN",
    })
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "USER"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Duplicate email returns 409."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Different",
        "email": "test@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 409
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_register_duplicate_email_lost_race(client: AsyncClient, test_user, monkeypatch):
    """Two sign-ups racing on one email: the unique index turns the loser into a 409."""
    async def never_taken(db, email):
        return False

    monkeypatch.setattr(auth_service, "_email_taken", never_taken)

    response = await client.post("/api/v1/auth/register", json={
        "name": "Racer",
        "email": "test@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 409
    assert response.json()["error"] == "User already exists with this email"


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Password under 8 chars is rejected with a per-field message."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Weak",
        "email": "weak@example.com",
        "password": "short",
    })
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Invalid input data"
    assert [d["field"] for d in body["details"]] == ["password"]


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return JWT token."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert "access_token" in data
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_token_opens_profile(client: AsyncClient, test_user):
    login = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    token = login.json()["data"]["access_token"]

    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == test_user.id


@pytest.mark.asyncio
async def test_profile_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "details": None, "success": False}


@pytest.mark.asyncio
async def test_profile_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
