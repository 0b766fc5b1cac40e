"""JWT token creation and verification.

Tokens carry the username as ``sub`` and expire after JWT_EXPIRE_MINUTES.
One shared JWT_SECRET per app. No refresh tokens and no revocation: a token is
valid until it expires.

A TokenService is built from the app's Settings in ``create_app`` and kept on
``app.state.tokens``; nothing here reads the module-level settings.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import Settings
from src.sp_common.errors import InvalidCredentialsError


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._expire = timedelta(minutes=expire_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expire_minutes=settings.JWT_EXPIRE_MINUTES,
        )

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds, as reported by the login response."""
        return int(self._expire.total_seconds())

    def create_access_token(self, username: str) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": username,
            "type": "access",
            "iat": now,
            "exp": now + self._expire,
        }
        return str(jwt.encode(payload, self._secret, algorithm=self._algorithm))

    def decode_token(self, token: str) -> dict[str, str]:
        """Decode and validate an access token.

        Returns:
            Decoded payload dict with at minimum {"sub": ..., "type": "access"}.

        Raises:
            InvalidCredentialsError: Token invalid, expired, or not an access token.
        """
        try:
            payload: dict[str, str] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],  # Explicit list prevents algorithm confusion
            )
        except JWTError:
            raise InvalidCredentialsError() from None

        if payload.get("type") != "access":
            raise InvalidCredentialsError()

        return payload
