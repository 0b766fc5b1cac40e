"""The app honours the Settings object it is built with, not the process-wide one."""

import uuid
from collections.abc import AsyncIterator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import create_app
from src.sp_gateway.auth.jwt_handler import TokenService
from src.sp_ledger.infrastructure.memory_store import InMemoryLedgerStore

PASSWORD = "TestPass123!"

ClientFactory = Callable[..., AsyncClient]


@pytest.fixture
async def client_with() -> AsyncIterator[ClientFactory]:
    clients: list[AsyncClient] = []

    def _build(**overrides: object) -> AsyncClient:
        settings = Settings(RATE_LIMIT_ENABLED=False, **overrides)
        app = create_app(settings, store=InMemoryLedgerStore())
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield _build
    for ac in clients:
        await ac.aclose()


async def _login(client: AsyncClient) -> dict:
    creds = {"username": f"cfg_{uuid.uuid4().hex[:8]}", "password": PASSWORD}
    resp = await client.post("/api/v1/users/signup", json=creds)
    assert resp.status_code == 201, resp.text
    resp = await client.post("/api/v1/users/login", json=creds)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def _auth(login: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {login['access_token']}"}


class TestTokenSettings:
    async def test_expires_in_follows_injected_settings(self, client_with) -> None:
        client = client_with(JWT_EXPIRE_MINUTES=5)

        login = await _login(client)

        assert login["expires_in"] == 300

    async def test_token_signed_with_injected_secret(self, client_with) -> None:
        client = client_with(JWT_SECRET="injected-secret")
        login = await _login(client)

        resp = await client.get("/api/v1/users/whoami", headers=_auth(login))
        assert resp.status_code == 200
        payload = TokenService("injected-secret").decode_token(login["access_token"])
        assert payload["type"] == "access"

    async def test_token_from_other_app_rejected(self, client_with) -> None:
        issuer = client_with(JWT_SECRET="issuer-secret")
        verifier = client_with(JWT_SECRET="verifier-secret")
        login = await _login(issuer)

        resp = await verifier.get("/api/v1/users/whoami", headers=_auth(login))

        assert resp.status_code == 401


class TestAmountSettings:
    async def test_deposit_above_default_cap_allowed_when_configured(self, client_with) -> None:
        client = client_with(MAX_TRANSFER_AMOUNT=10**12)
        headers = _auth(await _login(client))

        resp = await client.post(
            "/api/v1/balance/deposit", json={"deposit_amount": 5_000_000_000}, headers=headers
        )

        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["balance"] == 5_000_000_000

    async def test_transfer_above_default_cap_allowed_when_configured(self, client_with) -> None:
        client = client_with(MAX_TRANSFER_AMOUNT=10**12)
        sender = await _login(client)
        receiver = f"cfg_{uuid.uuid4().hex[:8]}"
        await client.post(
            "/api/v1/users/signup", json={"username": receiver, "password": PASSWORD}
        )
        await client.post(
            "/api/v1/balance/deposit",
            json={"deposit_amount": 6_000_000_000},
            headers=_auth(sender),
        )

        resp = await client.post(
            "/api/v1/transactions",
            json={"to_user": receiver, "amount": 5_000_000_000},
            headers=_auth(sender),
        )

        assert resp.status_code == 200, resp.text
        assert resp.json()["data"]["amount"] == 5_000_000_000

    async def test_configured_cap_still_enforced(self, client_with) -> None:
        client = client_with(MAX_TRANSFER_AMOUNT=1_000)
        headers = _auth(await _login(client))

        resp = await client.post(
            "/api/v1/balance/deposit", json={"deposit_amount": 1_001}, headers=headers
        )

        assert resp.status_code == 422
        assert resp.json()["code"] == 2003
