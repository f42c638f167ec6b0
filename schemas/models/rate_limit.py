"""
Rate limit entry document model.

Maps to the `rate-limits` MongoDB collection. One document per allowed
request; the sliding-window count is a query over timestamp. A TTL index
removes entries once they can no longer fall inside any window.
"""

from __future__ import annotations

from datetime import datetime

from schemas.models.base import MongoBaseModel

# Longest configured window is far shorter than this
ENTRY_RETENTION_SECONDS = 24 * 60 * 60


class RateLimitEntryDoc(MongoBaseModel):
    """Document model for the `rate-limits` collection."""

    ip: str
    route: str
    timestamp: datetime
