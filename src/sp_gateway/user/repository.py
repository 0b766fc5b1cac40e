from typing import Protocol

from src.sp_gateway.user.models import UserCredential


class UserRepositoryProtocol(Protocol):
    async def get(self, username: str) -> UserCredential | None: ...

    async def create(self, username: str, password_hash: str) -> UserCredential: ...
