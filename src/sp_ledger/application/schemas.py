"""Pydantic schemas for the balance and transaction APIs."""

from pydantic import BaseModel, Field

from src.sp_common.validation import USERNAME_PATTERN
from src.sp_transaction.domain.models import TransactionRecord

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
# Upper bounds come from Settings.MAX_TRANSFER_AMOUNT and are checked by
# LedgerService, not here.


class DepositRequest(BaseModel):
    deposit_amount: int = Field(..., gt=0, description="Amount to deposit")


class TransferRequest(BaseModel):
    to_user: str = Field(..., pattern=USERNAME_PATTERN, description="Receiver username")
    amount: int = Field(..., gt=0, description="Amount to transfer")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    username: str
    balance: int


class DepositResponse(BaseModel):
    username: str
    deposited: int
    balance: int


class TransactionItem(BaseModel):
    transaction_id: str
    from_user: str
    to_user: str
    amount: int
    created_at: str  # ISO8601 string

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionItem":
        return cls(
            transaction_id=str(record.transaction_id),
            from_user=record.from_user,
            to_user=record.to_user,
            amount=record.amount,
            created_at=record.created_at.isoformat(),
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    count: int
