"""Domain models for sp_transaction — pure dataclasses, no SQLAlchemy dependency."""

import uuid
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TransactionRecord:
    transaction_id: uuid.UUID
    from_user: str
    to_user: str
    amount: int
    created_at: datetime

    def involves(self, username: str) -> bool:
        return username in (self.from_user, self.to_user)
