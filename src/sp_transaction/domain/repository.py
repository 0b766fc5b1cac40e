"""Repository Protocol for the append-only transaction log.

``append`` is only ever called by the transfer engine, inside the same unit of
work that moved the balances. There is no update or delete.
"""

import uuid
from typing import Protocol

from src.sp_transaction.domain.models import TransactionRecord


class TransactionLogProtocol(Protocol):
    async def append(self, from_user: str, to_user: str, amount: int) -> TransactionRecord: ...

    async def get(self, transaction_id: uuid.UUID) -> TransactionRecord | None: ...

    async def list_for_user(self, username: str) -> list[TransactionRecord]: ...
