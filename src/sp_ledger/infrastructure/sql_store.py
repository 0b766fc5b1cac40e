"""PostgreSQL ledger store.

One unit of work == one AsyncSession transaction (READ COMMITTED). Row locks
come from ``SELECT ... FOR UPDATE`` in SqlAccountRepository and are released by
COMMIT/ROLLBACK. ``lock_timeout`` is set per transaction so a blocked lock wait
ends with SQLSTATE 55P03 even if the caller never times out.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from config.settings import Settings
from src.sp_account.infrastructure.persistence import SqlAccountRepository
from src.sp_common.database import create_engine, create_session_factory
from src.sp_gateway.user.persistence import SqlUserRepository
from src.sp_transaction.infrastructure.persistence import SqlTransactionLog

logger = logging.getLogger(__name__)

_SET_LOCK_TIMEOUT_SQL = text("SELECT set_config('lock_timeout', :value, true)")


class SqlUnitOfWork:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._closed = False
        self.accounts = SqlAccountRepository(session)
        self.transactions = SqlTransactionLog(session)
        self.users = SqlUserRepository(session)

    @property
    def closed(self) -> bool:
        return self._closed

    async def commit(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._session.commit()

    async def rollback(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._session.rollback()


class SqlLedgerStore:
    def __init__(self, engine: AsyncEngine, lock_timeout_ms: int | None = None) -> None:
        self._engine = engine
        self._session_factory: async_sessionmaker[AsyncSession] = create_session_factory(engine)
        self._lock_timeout_ms = lock_timeout_ms

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlLedgerStore":
        return cls(create_engine(settings), lock_timeout_ms=settings.LOCK_TIMEOUT_MS)

    async def connect(self) -> None:
        """Verify the database is reachable."""
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Ledger store connected: %s", self._engine.url.render_as_string())

    async def close(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[SqlUnitOfWork]:
        async with self._session_factory() as session:
            uow = SqlUnitOfWork(session)
            try:
                if self._lock_timeout_ms:
                    await session.execute(
                        _SET_LOCK_TIMEOUT_SQL, {"value": f"{self._lock_timeout_ms}ms"}
                    )
                yield uow
            finally:
                await uow.rollback()
