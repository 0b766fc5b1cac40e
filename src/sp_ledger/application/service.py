"""LedgerService — the public ledger operations.

Thin composition layer: validates inputs, delegates to AccountService,
TransferEngine and TransactionLogService, and turns engine outcomes into
AppErrors the API layer can render. The caller passes an already-trusted
username; tokens never reach this layer.
"""

import uuid

from src.sp_account.application.service import AccountService
from src.sp_common.errors import InsufficientBalanceError, TransactionForbiddenError
from src.sp_common.unit_of_work import LedgerStore
from src.sp_common.validation import DEFAULT_MAX_AMOUNT, validate_amount, validate_username
from src.sp_transaction.application.service import TransactionLogService
from src.sp_transaction.domain.models import TransactionRecord
from src.sp_transfer.engine import TransferEngine


class LedgerService:
    def __init__(
        self,
        store: LedgerStore,
        timeout_seconds: float | None = None,
        max_amount: int = DEFAULT_MAX_AMOUNT,
    ) -> None:
        self._accounts = AccountService(store, timeout_seconds)
        self._engine = TransferEngine(store, timeout_seconds)
        self._log = TransactionLogService(store, timeout_seconds)
        self._max_amount = max_amount

    async def deposit(self, username: str, amount: int) -> int:
        validate_amount(amount, self._max_amount)
        return await self._accounts.deposit(username, amount)

    async def get_balance(self, username: str) -> int:
        return await self._accounts.get_balance(username)

    async def transfer(self, sender: str, receiver: str, amount: int) -> TransactionRecord:
        validate_amount(amount, self._max_amount)
        validate_username(receiver)
        result = await self._engine.transfer(sender, receiver, amount)
        if not result.committed or result.record is None:
            raise InsufficientBalanceError(amount)
        return result.record

    async def get_transaction(
        self, transaction_id: uuid.UUID, requester: str
    ) -> TransactionRecord:
        # Existence is resolved first: unknown id -> 404, someone else's -> 403
        record = await self._log.get(transaction_id)
        if not record.involves(requester):
            raise TransactionForbiddenError()
        return record

    async def list_transactions(self, username: str) -> list[TransactionRecord]:
        return await self._log.list_for_user(username)
