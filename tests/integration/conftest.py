"""Integration-test fixtures.

The HTTP flows run the full app (middleware, routers, services) against the
in-memory store from the root conftest. ``register`` signs a user up and
returns the Bearer headers for them.
"""

import uuid
from collections.abc import Awaitable, Callable

import pytest
from httpx import AsyncClient

PASSWORD = "TestPass123!"

Register = Callable[..., Awaitable[dict[str, str]]]


def unique_username(prefix: str = "user") -> str:
    """Generate a unique 4-16 char username to avoid test pollution."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


@pytest.fixture
def register(client: AsyncClient) -> Register:
    async def _register(username: str | None = None, deposit: int = 0) -> dict[str, str]:
        username = username or unique_username()
        creds = {"username": username, "password": PASSWORD}
        resp = await client.post("/api/v1/users/signup", json=creds)
        assert resp.status_code == 201, resp.text
        login_resp = await client.post("/api/v1/users/login", json=creds)
        token = login_resp.json()["data"]["access_token"]
        headers = {"Authorization": f"Bearer {token}"}
        if deposit:
            dep = await client.post(
                "/api/v1/balance/deposit", json={"deposit_amount": deposit}, headers=headers
            )
            assert dep.status_code == 200, dep.text
        return headers

    return _register
