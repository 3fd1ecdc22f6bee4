import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import User, UserStatus
from tests.fixtures.auth_helpers import bearer, login


@pytest.mark.asyncio
async def test_refresh_issues_new_access_token(client: AsyncClient, seeded, clock):
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])

    clock.advance(minutes=30)
    response = await client.post(
        "/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "Bearer"
    assert data["access_token"] != tokens["access_token"]

    me = await client.get("/auth/me", headers=bearer(data["access_token"]))
    assert me.status_code == 200
    assert me.json()["user_id"] == alice["id"]


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, seeded):
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])

    response = await client.post(
        "/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_refresh_token_expires_after_seven_days(client: AsyncClient, seeded, clock):
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])

    clock.advance(days=7, seconds=1)
    response = await client.post(
        "/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "EXPIRED"


@pytest.mark.asyncio
async def test_refresh_with_tampered_token(client: AsyncClient, seeded):
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])
    header, payload, signature = tokens["refresh_token"].split(".")
    tampered = f"{header}.{payload}.{signature[::-1]}"

    response = await client.post("/auth/refresh", json={"refresh_token": tampered})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "BAD_SIGNATURE"


@pytest.mark.asyncio
async def test_refresh_rejected_once_user_disabled(client: AsyncClient, seeded, db_session):
    """Claims are re-derived from the user record on every refresh"""
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])

    user = (await db_session.exec(select(User).where(User.username == "alice"))).one()
    user.status = UserStatus.disabled
    db_session.add(user)
    await db_session.commit()

    response = await client.post(
        "/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID"


@pytest.mark.asyncio
async def test_refresh_picks_up_role_change(client: AsyncClient, seeded, db_session):
    alice = seeded["users"]["alice"]
    tokens = await login(client, "alice", alice["password"])

    user = (await db_session.exec(select(User).where(User.username == "alice"))).one()
    user.roles = ["USER", "ADMIN"]
    db_session.add(user)
    await db_session.commit()

    response = await client.post(
        "/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    me = await client.get("/auth/me", headers=bearer(response.json()["access_token"]))

    assert me.json()["roles"] == ["USER", "ADMIN"]
