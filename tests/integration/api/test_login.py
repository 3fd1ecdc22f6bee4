import pytest
from httpx import AsyncClient

from tests.fixtures.auth_helpers import bearer, login


@pytest.mark.asyncio
async def test_successful_login(client: AsyncClient, seeded):
    """Login with username + password returns an access and a refresh token"""
    alice = seeded["users"]["alice"]

    response = await client.post(
        "/auth/login", json={"username": "alice", "password": alice["password"]}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "Bearer"
    assert data["expires_in"] == 86400
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["access_token"] != data["refresh_token"]


@pytest.mark.asyncio
async def test_login_invalid_password(client: AsyncClient, seeded):
    response = await client.post(
        "/auth/login", json={"username": "alice", "password": "WrongPassword!"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_unknown_user_same_error(client: AsyncClient, seeded):
    response = await client.post(
        "/auth/login", json={"username": "mallory", "password": "whatever123"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_disabled_user(client: AsyncClient, seeded):
    carol = seeded["users"]["carol"]

    response = await client.post(
        "/auth/login", json={"username": "carol", "password": carol["password"]}
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_DISABLED"


@pytest.mark.asyncio
async def test_me_returns_claims(client: AsyncClient, seeded):
    bob = seeded["users"]["bob"]
    tokens = await login(client, "bob", bob["password"])

    response = await client.get("/auth/me", headers=bearer(tokens["access_token"]))

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "bob"
    assert data["user_id"] == bob["id"]
    assert data["email"] == "bob@example.com"
    assert data["roles"] == ["USER", "ADMIN"]


@pytest.mark.asyncio
async def test_me_without_token(client: AsyncClient):
    response = await client.get("/auth/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_with_garbage_token(client: AsyncClient):
    response = await client.get("/auth/me", headers=bearer("not-a-token"))

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "MALFORMED"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_rejects_refresh_token(client: AsyncClient, seeded):
    """A refresh token is not accepted where an access token is required"""
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])

    response = await client.get("/auth/me", headers=bearer(tokens["refresh_token"]))

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID"


@pytest.mark.asyncio
async def test_access_token_expires(client: AsyncClient, seeded, clock):
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])

    clock.advance(hours=24, seconds=-1)
    assert (await client.get("/auth/me", headers=bearer(tokens["access_token"]))).status_code == 200

    clock.advance(seconds=2)
    response = await client.get("/auth/me", headers=bearer(tokens["access_token"]))
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "EXPIRED"


@pytest.mark.asyncio
async def test_logout_revokes_access_token(client: AsyncClient, seeded):
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])
    headers = bearer(tokens["access_token"])

    response = await client.post("/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "logged_out"

    response = await client.get("/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
