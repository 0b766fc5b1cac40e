"""SqlTransactionLog — PostgreSQL implementation of TransactionLogProtocol.

The ``transactions`` table is append-only. ``transaction_id`` is generated
here (uuid4) so the record returned by ``append`` is complete before commit;
``created_at`` comes from the database clock.
"""

import uuid

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sp_common.errors import InternalError
from src.sp_transaction.domain.models import TransactionRecord

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions (transaction_id, from_user, to_user, amount)
    VALUES (:transaction_id, :from_user, :to_user, :amount)
    RETURNING transaction_id, from_user, to_user, amount, created_at
""")

_GET_TRANSACTION_SQL = text("""
    SELECT transaction_id, from_user, to_user, amount, created_at
    FROM transactions
    WHERE transaction_id = :transaction_id
""")

# Two index scans (from_user, to_user) merged by the planner
_LIST_FOR_USER_SQL = text("""
    SELECT transaction_id, from_user, to_user, amount, created_at
    FROM transactions
    WHERE from_user = :username OR to_user = :username
    ORDER BY created_at DESC, transaction_id
""")


def _row_to_record(row: object) -> TransactionRecord:
    return TransactionRecord(
        transaction_id=row.transaction_id,  # type: ignore[attr-defined]
        from_user=row.from_user,  # type: ignore[attr-defined]
        to_user=row.to_user,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class SqlTransactionLog:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, from_user: str, to_user: str, amount: int) -> TransactionRecord:
        result = await self._session.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "transaction_id": uuid.uuid4(),
                "from_user": from_user,
                "to_user": to_user,
                "amount": amount,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_record(row)

    async def get(self, transaction_id: uuid.UUID) -> TransactionRecord | None:
        result = await self._session.execute(
            _GET_TRANSACTION_SQL, {"transaction_id": transaction_id}
        )
        row = result.fetchone()
        return _row_to_record(row) if row else None

    async def list_for_user(self, username: str) -> list[TransactionRecord]:
        result = await self._session.execute(_LIST_FOR_USER_SQL, {"username": username})
        return [_row_to_record(row) for row in result.fetchall()]
