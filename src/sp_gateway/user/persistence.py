"""SqlUserRepository — credentials via the UserORM mapping."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sp_common.errors import UsernameExistsError
from src.sp_gateway.user.db_models import UserORM
from src.sp_gateway.user.models import UserCredential


def _orm_to_credential(user: UserORM) -> UserCredential:
    return UserCredential(
        username=user.username,
        password_hash=user.password_hash,
        created_at=user.created_at,
    )


class SqlUserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, username: str) -> UserCredential | None:
        result = await self._session.execute(
            select(UserORM).where(UserORM.username == username)
        )
        user = result.scalar_one_or_none()
        return _orm_to_credential(user) if user else None

    async def create(self, username: str, password_hash: str) -> UserCredential:
        user = UserORM(username=username, password_hash=password_hash)
        self._session.add(user)
        try:
            await self._session.flush()  # primary key is the final uniqueness guard
        except IntegrityError:
            raise UsernameExistsError() from None
        await self._session.refresh(user)  # pick up server-side created_at
        return _orm_to_credential(user)
