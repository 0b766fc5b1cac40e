"""TransferEngine — moves funds between two accounts as one unit of work.

Steps inside a single unit of work:
  1. lock both account rows in canonical (lexicographic) order
  2. read the sender balance under the lock
  3. insufficient funds -> roll back, report ``committed=False``
  4. debit sender, credit receiver, append the transaction record
  5. commit

Lock order never depends on transfer direction: A->B and B->A both lock
min(A, B) first, so two opposite transfers can not wait on each other.
"""

import logging
from dataclasses import dataclass

from src.sp_common.errors import AccountNotFoundError, InvalidAmountError, SameAccountError
from src.sp_common.faults import fault_boundary
from src.sp_common.unit_of_work import LedgerStore
from src.sp_transaction.domain.models import TransactionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    committed: bool
    record: TransactionRecord | None = None


def canonical_lock_order(*usernames: str) -> list[str]:
    """Distinct usernames in the order their rows must be locked."""
    return sorted(set(usernames))


class TransferEngine:
    def __init__(self, store: LedgerStore, timeout_seconds: float | None = None) -> None:
        self._store = store
        self._timeout = timeout_seconds

    async def transfer(
        self,
        sender: str,
        receiver: str,
        amount: int,
        timeout: float | None = None,
    ) -> TransferResult:
        """Move ``amount`` from ``sender`` to ``receiver``.

        Returns ``TransferResult(committed=False)`` when the sender can not cover
        the amount; nothing is written in that case.

        Raises:
            InvalidAmountError: amount <= 0.
            SameAccountError: sender == receiver.
            AccountNotFoundError: either account is missing.
            OperationTimeoutError: the unit of work did not finish in time.
            LedgerFaultError: the store failed; nothing was applied.
        """
        if amount <= 0:
            raise InvalidAmountError(amount)
        if sender == receiver:
            raise SameAccountError()

        async with fault_boundary("transfer", timeout if timeout is not None else self._timeout):
            result = await self._transfer_in_unit(sender, receiver, amount)

        if not result.committed:
            logger.info(
                "Transfer rejected, insufficient funds: %s -> %s amount=%d",
                sender,
                receiver,
                amount,
            )
        return result

    async def _transfer_in_unit(self, sender: str, receiver: str, amount: int) -> TransferResult:
        async with self._store.unit_of_work() as uow:
            locked = {}
            for username in canonical_lock_order(sender, receiver):
                account = await uow.accounts.lock_for_update(username)
                if account is None:
                    raise AccountNotFoundError(username)
                locked[username] = account

            if locked[sender].balance < amount:
                await uow.rollback()
                return TransferResult(committed=False)

            await uow.accounts.apply_delta(sender, -amount)
            await uow.accounts.apply_delta(receiver, amount)
            record = await uow.transactions.append(sender, receiver, amount)
            await uow.commit()

        logger.debug("Transfer %s committed: %s -> %s amount=%d",
                     record.transaction_id, sender, receiver, amount)
        return TransferResult(committed=True, record=record)
