"""AccountService — the Account Store operations over a ledger store.

Each call is one unit of work. Deposit is a single atomic read-modify-write
(``balance = balance + amount``) under the row lock, so concurrent deposits
to the same account never lose an update.
"""

import logging

from src.sp_common.errors import AccountNotFoundError
from src.sp_common.faults import fault_boundary
from src.sp_common.unit_of_work import LedgerStore

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, store: LedgerStore, timeout_seconds: float | None = None) -> None:
        self._store = store
        self._timeout = timeout_seconds

    async def get_balance(self, username: str) -> int:
        async with fault_boundary("get_balance", self._timeout):
            async with self._store.unit_of_work() as uow:
                account = await uow.accounts.get_account(username)
        if account is None:
            raise AccountNotFoundError(username)
        return account.balance

    async def deposit(self, username: str, amount: int) -> int:
        """Add ``amount`` (already validated > 0) and return the new balance."""
        async with fault_boundary("deposit", self._timeout):
            async with self._store.unit_of_work() as uow:
                account = await uow.accounts.deposit(username, amount)
                if account is None:
                    raise AccountNotFoundError(username)
                await uow.commit()
        logger.debug("Deposit %d to %s, balance now %d", amount, username, account.balance)
        return account.balance
