"""FastAPI dependency: get_current_username.

The trusted username is the only thing the ledger layer receives from
authentication:

    @router.get("/protected")
    async def protected(username: str = Depends(get_current_username)):
        ...
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.sp_common.errors import InvalidCredentialsError

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_username(request: Request, token: str = Depends(oauth2_scheme)) -> str:
    """Validate the JWT Bearer token against the app's TokenService and return its subject.

    Raises HTTP 401 if the token is missing, invalid, or expired.
    """
    try:
        payload = request.app.state.tokens.decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    username: str | None = payload.get("sub")
    if not username:
        raise _CREDENTIALS_EXCEPTION
    return username
