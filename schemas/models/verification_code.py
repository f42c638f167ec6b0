"""
Verification code document model.

Maps to the `verification-codes` MongoDB collection.

One document per (email, purpose); re-requesting a code overwrites the
document in place. code_hash stores SHA-256(code); the plain code only ever
leaves the process inside an email. A document becomes stale after
expires_at but is not actively deleted.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from schemas.models.base import MongoBaseModel

CODE_TTL_SECONDS = 15 * 60
MAX_VERIFICATION_ATTEMPTS = 3


class VerificationPurpose(str, Enum):
    PASSWORD_RESET = "password-reset"
    GENERIC = "generic"


class VerificationCodeDoc(MongoBaseModel):
    """Document model for the `verification-codes` collection."""

    email: str
    purpose: VerificationPurpose
    code_hash: str
    expires_at: datetime
    attempts: int = Field(default=0, ge=0)
    verified: bool = False
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
