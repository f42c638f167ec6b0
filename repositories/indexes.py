"""
Index definitions, applied once at startup.

create_index is idempotent, so re-running on every boot is safe.
"""

from __future__ import annotations

from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.database import AsyncDatabase

from schemas.models.rate_limit import ENTRY_RETENTION_SECONDS
from shared.logging import get_logger

log = get_logger(__name__)

VERIFICATION_CODES = "verification-codes"
RESET_TOKENS = "reset-tokens"
RATE_LIMITS = "rate-limits"
ORGANIZER_APPLICATIONS = "organizer-applications"
USERS = "users"


async def ensure_indexes(db: AsyncDatabase) -> None:
    await db[VERIFICATION_CODES].create_index(
        [("email", ASCENDING), ("purpose", ASCENDING)], unique=True
    )
    await db[RESET_TOKENS].create_index([("token_hash", ASCENDING)], unique=True)
    await db[RESET_TOKENS].create_index([("email", ASCENDING)])
    await db[RATE_LIMITS].create_index(
        [("ip", ASCENDING), ("route", ASCENDING), ("timestamp", DESCENDING)]
    )
    await db[RATE_LIMITS].create_index(
        [("timestamp", ASCENDING)], expireAfterSeconds=ENTRY_RETENTION_SECONDS
    )
    await db[ORGANIZER_APPLICATIONS].create_index(
        [("email", ASCENDING), ("created_at", DESCENDING)]
    )
    await db[ORGANIZER_APPLICATIONS].create_index([("user_id", ASCENDING)])
    await db[USERS].create_index([("email", ASCENDING)])
    log.info("mongodb_indexes_ensured")
