"""TransactionLogService — read side of the transaction log.

Appends never go through here; they happen inside the transfer engine's
unit of work.
"""

import uuid

from src.sp_common.errors import TransactionNotFoundError
from src.sp_common.faults import fault_boundary
from src.sp_common.unit_of_work import LedgerStore
from src.sp_transaction.domain.models import TransactionRecord


class TransactionLogService:
    def __init__(self, store: LedgerStore, timeout_seconds: float | None = None) -> None:
        self._store = store
        self._timeout = timeout_seconds

    async def get(self, transaction_id: uuid.UUID) -> TransactionRecord:
        async with fault_boundary("get_transaction", self._timeout):
            async with self._store.unit_of_work() as uow:
                record = await uow.transactions.get(transaction_id)
        if record is None:
            raise TransactionNotFoundError(transaction_id)
        return record

    async def list_for_user(self, username: str) -> list[TransactionRecord]:
        """All records where ``username`` is sender or receiver, newest first."""
        async with fault_boundary("list_transactions", self._timeout):
            async with self._store.unit_of_work() as uow:
                records = await uow.transactions.list_for_user(username)
        return sorted(records, key=lambda r: r.created_at, reverse=True)
