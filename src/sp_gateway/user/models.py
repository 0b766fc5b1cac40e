"""Domain model for login credentials."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserCredential:
    username: str
    password_hash: str
    created_at: datetime | None = None
