"""User service: signup and login.

Signup writes the credentials row and the zero-balance account row in one
unit of work, so a user never exists without an account.
"""

import logging

from src.sp_common.errors import InvalidCredentialsError, UsernameExistsError
from src.sp_common.faults import fault_boundary
from src.sp_common.unit_of_work import LedgerStore
from src.sp_gateway.auth.jwt_handler import TokenService
from src.sp_gateway.auth.password import hash_password, verify_password
from src.sp_gateway.user.models import UserCredential

logger = logging.getLogger(__name__)


class UserService:
    """One instance per app, built by create_app."""

    def __init__(
        self,
        store: LedgerStore,
        tokens: TokenService,
        timeout_seconds: float | None = None,
    ) -> None:
        self._store = store
        self.tokens = tokens
        self._timeout = timeout_seconds

    async def register(self, username: str, password: str) -> UserCredential:
        password_hash = hash_password(password)  # bcrypt is slow, keep it outside the transaction
        async with fault_boundary("register", self._timeout):
            async with self._store.unit_of_work() as uow:
                if await uow.users.get(username) is not None:
                    raise UsernameExistsError()
                user = await uow.users.create(username, password_hash)
                await uow.accounts.create(username)
                await uow.commit()
        logger.info("User registered: %s", username)
        return user

    async def login(self, username: str, password: str) -> str:
        """Authenticate and return an access token.

        Unknown user and wrong password both raise InvalidCredentialsError.
        """
        async with fault_boundary("login", self._timeout):
            async with self._store.unit_of_work() as uow:
                user = await uow.users.get(username)

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return self.tokens.create_access_token(user.username)
