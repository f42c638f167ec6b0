"""
User document model.

Maps to the `users` MongoDB collection. Accounts are created by the sign-up
flow; this service reads them for existence/status checks and writes only
the password fields during a reset.

is_active is absent on most documents; only an explicit False deactivates
an account.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from schemas.models.base import MongoBaseModel


class PasswordHistoryEntry(BaseModel):
    password_hash: str
    changed_at: datetime


class UserDoc(MongoBaseModel):
    """Document model for the `users` collection."""

    email: str
    name: Optional[str] = None
    password_hash: Optional[str] = None
    password_history: list[PasswordHistoryEntry] = []
    role: str = "user"
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def active(self) -> bool:
        return self.is_active is not False
