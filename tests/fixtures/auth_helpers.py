from typing import Any, Dict

from httpx import AsyncClient


async def login(client: AsyncClient, username: str, password: str) -> Dict[str, Any]:
    response = await client.post(
        "/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
