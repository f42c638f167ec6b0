"""
Password reset token document model.

Maps to the `reset-tokens` MongoDB collection.

A new document is created for every successful password-reset code
verification. token_hash stores SHA-256(token); used_at is None until the
token is consumed by a password change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel

RESET_TOKEN_TTL_SECONDS = 30 * 60


class ResetTokenDoc(MongoBaseModel):
    """Document model for the `reset-tokens` collection."""

    email: str
    token_hash: str
    expires_at: datetime
    created_at: Optional[datetime] = None
    used: bool = False
    used_at: Optional[datetime] = None
