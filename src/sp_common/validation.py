"""Input checks shared by the ledger facade and the HTTP schemas.

Amounts are plain integers (no currency, no fractions). Balances are BIGINT;
a single amount is capped so that one request can never overflow a balance.
"""

import re

from src.sp_common.errors import InvalidAmountError, InvalidUsernameError

USERNAME_PATTERN = r"^[A-Za-z0-9_]{4,16}$"
DEFAULT_MAX_AMOUNT = 2_147_483_647

_USERNAME_RE = re.compile(USERNAME_PATTERN)


def validate_amount(amount: object, maximum: int = DEFAULT_MAX_AMOUNT) -> int:
    """Return ``amount`` if it is an int in [1, maximum], else raise InvalidAmountError."""
    # bool is an int subclass; True must not deposit 1
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(amount)
    if not (1 <= amount <= maximum):
        raise InvalidAmountError(amount)
    return amount


def validate_username(username: object) -> str:
    """Return ``username`` if it matches USERNAME_PATTERN, else raise InvalidUsernameError."""
    if not isinstance(username, str) or _USERNAME_RE.fullmatch(username) is None:
        raise InvalidUsernameError(username)
    return username
