"""SqlAccountRepository — PostgreSQL implementation of AccountRepositoryProtocol.

Balance mutations are single ``UPDATE ... RETURNING`` statements, so the
read-modify-write happens inside the database under the row lock. The
``balance >= 0`` CHECK constraint on ``accounts`` is the last line of defence
against a negative balance.

Transaction ownership: the session is owned by the unit of work
(SqlUnitOfWork); this class never commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sp_account.domain.models import Account
from src.sp_common.errors import AccountNotFoundError, OperationTimeoutError

# SQLSTATE lock_not_available, raised when lock_timeout expires
_LOCK_NOT_AVAILABLE = "55P03"

_GET_ACCOUNT_SQL = text("""
    SELECT username, balance, created_at, updated_at
    FROM accounts
    WHERE username = :username
""")

_LOCK_ACCOUNT_SQL = text("""
    SELECT username, balance, created_at, updated_at
    FROM accounts
    WHERE username = :username
    FOR UPDATE
""")

# updated_at is maintained by the trg_accounts_touch trigger
_APPLY_DELTA_SQL = text("""
    UPDATE accounts
    SET balance = balance + :delta
    WHERE username = :username
    RETURNING username, balance, created_at, updated_at
""")

_INSERT_ACCOUNT_SQL = text("""
    INSERT INTO accounts (username, balance)
    VALUES (:username, 0)
    RETURNING username, balance, created_at, updated_at
""")


def _row_to_account(row: object) -> Account:
    return Account(
        username=row.username,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _is_lock_timeout(exc: DBAPIError) -> bool:
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    return sqlstate == _LOCK_NOT_AVAILABLE


class SqlAccountRepository:
    """Concrete repository bound to one AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_account(self, username: str) -> Account | None:
        result = await self._session.execute(_GET_ACCOUNT_SQL, {"username": username})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def lock_for_update(self, username: str) -> Account | None:
        try:
            result = await self._session.execute(_LOCK_ACCOUNT_SQL, {"username": username})
        except DBAPIError as exc:
            if _is_lock_timeout(exc):
                raise OperationTimeoutError(f"lock account {username}") from exc
            raise
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def apply_delta(self, username: str, delta: int) -> Account:
        result = await self._session.execute(
            _APPLY_DELTA_SQL, {"username": username, "delta": delta}
        )
        row = result.fetchone()
        if row is None:
            raise AccountNotFoundError(username)
        return _row_to_account(row)

    async def deposit(self, username: str, amount: int) -> Account | None:
        try:
            result = await self._session.execute(
                _APPLY_DELTA_SQL, {"username": username, "delta": amount}
            )
        except DBAPIError as exc:
            if _is_lock_timeout(exc):
                raise OperationTimeoutError(f"deposit to {username}") from exc
            raise
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def create(self, username: str) -> Account:
        result = await self._session.execute(_INSERT_ACCOUNT_SQL, {"username": username})
        return _row_to_account(result.fetchone())
