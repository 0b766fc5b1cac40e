"""In-process ledger store with the same locking contract as the SQL store.

Each account row carries an ``asyncio.Lock`` that plays the part of a row lock.
A unit of work stages its writes and applies them in one synchronous step at
commit, so other tasks only ever see committed state (READ COMMITTED). Locks
are released when the unit commits or rolls back. Rows are never deleted, so a
lock object lives as long as its row.
"""

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime

from src.sp_account.domain.models import Account
from src.sp_common.errors import AccountNotFoundError, UsernameExistsError
from src.sp_gateway.user.models import UserCredential
from src.sp_transaction.domain.models import TransactionRecord

logger = logging.getLogger(__name__)


class ConstraintViolationError(Exception):
    """A commit would break a table constraint (the in-memory IntegrityError)."""


@dataclass
class _AccountRow:
    username: str
    balance: int
    created_at: datetime
    updated_at: datetime
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)


@dataclass
class InMemoryState:
    accounts: dict[str, _AccountRow] = field(default_factory=dict)
    transactions: dict[uuid.UUID, TransactionRecord] = field(default_factory=dict)
    users: dict[str, UserCredential] = field(default_factory=dict)


class _Staging:
    """Locks held and writes pending for one unit of work."""

    def __init__(self, state: InMemoryState) -> None:
        self.state = state
        self.held: dict[str, asyncio.Lock] = {}
        self.balances: dict[str, int] = {}
        self.new_accounts: dict[str, _AccountRow] = {}
        self.new_records: list[TransactionRecord] = []
        self.new_users: dict[str, UserCredential] = {}

    def row(self, username: str) -> _AccountRow | None:
        return self.state.accounts.get(username) or self.new_accounts.get(username)

    async def lock(self, username: str) -> _AccountRow | None:
        row = self.state.accounts.get(username)
        if row is None:
            # rows created by this unit are invisible to everyone else
            return self.new_accounts.get(username)
        if username not in self.held:
            await row.lock.acquire()
            self.held[username] = row.lock
        return row

    def balance_of(self, row: _AccountRow) -> int:
        return self.balances.get(row.username, row.balance)

    def snapshot(self, row: _AccountRow) -> Account:
        return Account(
            username=row.username,
            balance=self.balance_of(row),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def apply(self) -> None:
        """Validate every staged write, then apply them all. Never awaits."""
        for username in self.new_users:
            if username in self.state.users:
                raise UsernameExistsError()
        for username in self.new_accounts:
            if username in self.state.accounts:
                raise ConstraintViolationError(f"duplicate account: {username}")
        for username, balance in self.balances.items():
            if balance < 0:
                raise ConstraintViolationError(f"negative balance for {username}: {balance}")

        now = datetime.now(UTC)
        self.state.users.update(self.new_users)
        self.state.accounts.update(self.new_accounts)
        for username, balance in self.balances.items():
            row = self.state.accounts[username]
            row.balance = balance
            row.updated_at = now
        for record in self.new_records:
            self.state.transactions[record.transaction_id] = record

    def release(self) -> None:
        for lock in self.held.values():
            lock.release()
        self.held.clear()
        self.balances.clear()
        self.new_accounts.clear()
        self.new_records.clear()
        self.new_users.clear()


class InMemoryAccountRepository:
    def __init__(self, staging: _Staging) -> None:
        self._staging = staging

    async def get_account(self, username: str) -> Account | None:
        row = self._staging.row(username)
        return self._staging.snapshot(row) if row else None

    async def lock_for_update(self, username: str) -> Account | None:
        row = await self._staging.lock(username)
        return self._staging.snapshot(row) if row else None

    async def apply_delta(self, username: str, delta: int) -> Account:
        # an UPDATE locks the row implicitly, so do the same here
        row = await self._staging.lock(username)
        if row is None:
            raise AccountNotFoundError(username)
        self._staging.balances[username] = self._staging.balance_of(row) + delta
        return self._staging.snapshot(row)

    async def deposit(self, username: str, amount: int) -> Account | None:
        if self._staging.row(username) is None:
            return None
        return await self.apply_delta(username, amount)

    async def create(self, username: str) -> Account:
        if self._staging.row(username) is not None:
            raise ConstraintViolationError(f"duplicate account: {username}")
        now = datetime.now(UTC)
        row = _AccountRow(username=username, balance=0, created_at=now, updated_at=now)
        self._staging.new_accounts[username] = row
        return self._staging.snapshot(row)


class InMemoryTransactionLog:
    def __init__(self, staging: _Staging) -> None:
        self._staging = staging

    async def append(self, from_user: str, to_user: str, amount: int) -> TransactionRecord:
        record = TransactionRecord(
            transaction_id=uuid.uuid4(),
            from_user=from_user,
            to_user=to_user,
            amount=amount,
            created_at=datetime.now(UTC),
        )
        self._staging.new_records.append(record)
        return record

    async def get(self, transaction_id: uuid.UUID) -> TransactionRecord | None:
        record = self._staging.state.transactions.get(transaction_id)
        if record is not None:
            return record
        return next(
            (r for r in self._staging.new_records if r.transaction_id == transaction_id),
            None,
        )

    async def list_for_user(self, username: str) -> list[TransactionRecord]:
        committed = self._staging.state.transactions.values()
        records = [r for r in (*committed, *self._staging.new_records) if r.involves(username)]
        # newest insert first, so equal timestamps keep that order through the stable sort
        records.reverse()
        return sorted(records, key=lambda r: r.created_at, reverse=True)


class InMemoryUserRepository:
    def __init__(self, staging: _Staging) -> None:
        self._staging = staging

    async def get(self, username: str) -> UserCredential | None:
        return self._staging.new_users.get(username) or self._staging.state.users.get(username)

    async def create(self, username: str, password_hash: str) -> UserCredential:
        if await self.get(username) is not None:
            raise UsernameExistsError()
        user = UserCredential(
            username=username, password_hash=password_hash, created_at=datetime.now(UTC)
        )
        self._staging.new_users[username] = user
        return user


class InMemoryUnitOfWork:
    def __init__(self, state: InMemoryState) -> None:
        self._staging = _Staging(state)
        self._closed = False
        self.accounts = InMemoryAccountRepository(self._staging)
        self.transactions = InMemoryTransactionLog(self._staging)
        self.users = InMemoryUserRepository(self._staging)

    @property
    def closed(self) -> bool:
        return self._closed

    async def commit(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._staging.apply()
        finally:
            self._staging.release()

    async def rollback(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._staging.release()


class InMemoryLedgerStore:
    def __init__(self, state: InMemoryState | None = None) -> None:
        self._state = state or InMemoryState()

    async def connect(self) -> None:
        logger.info("Ledger store connected: in-memory")

    async def close(self) -> None:
        logger.info("Ledger store closed: in-memory (%d accounts)", len(self._state.accounts))

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[InMemoryUnitOfWork]:
        uow = InMemoryUnitOfWork(self._state)
        try:
            yield uow
        finally:
            await uow.rollback()
