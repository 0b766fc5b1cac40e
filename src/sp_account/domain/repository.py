"""Repository Protocol — dependency inversion for testability.

A repository instance is bound to one unit of work: every call runs inside
that unit's transaction, and row locks taken by ``lock_for_update`` are held
until the unit commits or rolls back.
"""

from typing import Protocol

from src.sp_account.domain.models import Account


class AccountRepositoryProtocol(Protocol):
    async def get_account(self, username: str) -> Account | None: ...

    async def lock_for_update(self, username: str) -> Account | None: ...

    async def apply_delta(self, username: str, delta: int) -> Account: ...

    async def deposit(self, username: str, amount: int) -> Account | None: ...

    async def create(self, username: str) -> Account: ...
