"""Shared test fixtures.

Settings are read at import time, so the environment is prepared before
anything from ``src`` or ``config`` is imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("LEDGER_BACKEND", "memory")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import AsyncIterator, Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import create_app  # noqa: E402
from src.sp_ledger.application.service import LedgerService  # noqa: E402
from src.sp_ledger.infrastructure.memory_store import InMemoryLedgerStore  # noqa: E402

OpenAccount = Callable[[str, int], Awaitable[None]]


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store: InMemoryLedgerStore) -> LedgerService:
    return LedgerService(store, timeout_seconds=5)


@pytest.fixture
def open_account(store: InMemoryLedgerStore) -> OpenAccount:
    """Create an account row directly in the store with a starting balance."""

    async def _open(username: str, balance: int = 0) -> None:
        async with store.unit_of_work() as uow:
            await uow.accounts.create(username)
            if balance:
                await uow.accounts.deposit(username, balance)
            await uow.commit()

    return _open


@pytest.fixture
async def client(store: InMemoryLedgerStore) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against an in-memory store."""
    app = create_app(store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
