"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account
  3xxx: Transaction
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int | None = None) -> None:
        message = f"Insufficient balance: required {required}"
        if available is not None:
            message += f", available {available}"
        super().__init__(2001, message, 402)


class AccountNotFoundError(AppError):
    def __init__(self, username: str) -> None:
        super().__init__(2002, f"Account not found: {username}", 404)


class InvalidAmountError(AppError):
    def __init__(self, amount: object) -> None:
        super().__init__(2003, f"Invalid amount: {amount!r}", 422)


class SameAccountError(AppError):
    def __init__(self) -> None:
        super().__init__(2004, "Sender and receiver must be different accounts", 422)


class InvalidUsernameError(AppError):
    def __init__(self, username: object) -> None:
        super().__init__(2005, f"Invalid username: {username!r}", 422)


# --- 3xxx: Transaction ---

class TransactionNotFoundError(AppError):
    def __init__(self, transaction_id: object) -> None:
        super().__init__(3001, f"Transaction not found: {transaction_id}", 404)


class TransactionForbiddenError(AppError):
    def __init__(self) -> None:
        super().__init__(3002, "User is not allowed to view this transaction", 403)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class LedgerFaultError(AppError):
    """Store unavailable or commit failed. The cause is logged, never returned."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(9003, "Internal server error", 500)


class OperationTimeoutError(AppError):
    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(9004, f"Operation timed out: {operation}", 503)
