"""Domain models for sp_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Account:
    username: str
    balance: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
