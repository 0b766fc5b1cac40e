"""Unit tests for SqlUnitOfWork / SqlLedgerStore with a mocked AsyncSession."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sp_ledger.infrastructure.sql_store import SqlLedgerStore, SqlUnitOfWork


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


def _store_with(session: AsyncMock, lock_timeout_ms: int | None = 5000) -> SqlLedgerStore:
    store = SqlLedgerStore(MagicMock(), lock_timeout_ms=lock_timeout_ms)
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=session)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    store._session_factory = factory
    return store


class TestSqlUnitOfWork:
    async def test_commit_once(self, session: AsyncMock) -> None:
        uow = SqlUnitOfWork(session)
        await uow.commit()
        await uow.commit()
        await uow.rollback()

        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()
        assert uow.closed

    async def test_rollback_once(self, session: AsyncMock) -> None:
        uow = SqlUnitOfWork(session)
        await uow.rollback()
        await uow.rollback()

        session.rollback.assert_awaited_once()

    def test_repositories_share_the_session(self, session: AsyncMock) -> None:
        uow = SqlUnitOfWork(session)
        assert uow.accounts._session is session
        assert uow.transactions._session is session
        assert uow.users._session is session


class TestSqlLedgerStore:
    async def test_sets_lock_timeout_for_the_transaction(self, session: AsyncMock) -> None:
        store = _store_with(session, lock_timeout_ms=1500)

        async with store.unit_of_work() as uow:
            await uow.commit()

        sql, params = session.execute.call_args.args
        assert "set_config('lock_timeout'" in str(sql)
        assert params == {"value": "1500ms"}

    async def test_no_lock_timeout_when_disabled(self, session: AsyncMock) -> None:
        store = _store_with(session, lock_timeout_ms=None)

        async with store.unit_of_work():
            pass

        session.execute.assert_not_awaited()

    async def test_rolls_back_when_not_committed(self, session: AsyncMock) -> None:
        store = _store_with(session)

        async with store.unit_of_work():
            pass

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    async def test_rolls_back_on_error(self, session: AsyncMock) -> None:
        store = _store_with(session)

        with pytest.raises(RuntimeError):
            async with store.unit_of_work():
                raise RuntimeError("boom")

        session.rollback.assert_awaited_once()

    async def test_no_rollback_after_commit(self, session: AsyncMock) -> None:
        store = _store_with(session)

        async with store.unit_of_work() as uow:
            await uow.commit()

        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()

    async def test_close_disposes_engine(self) -> None:
        engine = MagicMock()
        engine.dispose = AsyncMock()

        await SqlLedgerStore(engine).close()

        engine.dispose.assert_awaited_once()
