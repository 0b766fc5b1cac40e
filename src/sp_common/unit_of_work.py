"""Unit of work and store handle protocols.

Usage:
    async with store.unit_of_work() as uow:
        account = await uow.accounts.lock_for_update("alice")
        ...
        await uow.commit()

Leaving the ``async with`` block without ``commit()`` rolls the unit back,
whether the block ended normally, raised, or was cancelled.
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from src.sp_account.domain.repository import AccountRepositoryProtocol
from src.sp_gateway.user.repository import UserRepositoryProtocol
from src.sp_transaction.domain.repository import TransactionLogProtocol


class UnitOfWork(Protocol):
    accounts: AccountRepositoryProtocol
    transactions: TransactionLogProtocol
    users: UserRepositoryProtocol

    @property
    def closed(self) -> bool: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class LedgerStore(Protocol):
    def unit_of_work(self) -> AbstractAsyncContextManager[UnitOfWork]: ...

    async def connect(self) -> None: ...

    async def close(self) -> None: ...
