"""Repository for the `rate-limits` collection."""

from __future__ import annotations

from datetime import datetime

from repositories.base import BaseRepository
from schemas.models.rate_limit import RateLimitEntryDoc


class RateLimitRepository(BaseRepository):
    async def count_since(self, ip: str, route: str, since: datetime) -> int:
        """Number of recorded hits for (ip, route) at or after *since*."""
        return await self._col.count_documents(
            {"ip": ip, "route": route, "timestamp": {"$gte": since}}
        )

    async def record(self, ip: str, route: str, at: datetime) -> None:
        entry = RateLimitEntryDoc(ip=ip, route=route, timestamp=at)
        await self._col.insert_one(entry.to_mongo())
