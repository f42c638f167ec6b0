"""Repository for the `reset-tokens` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pymongo import ReturnDocument

from repositories.base import BaseRepository
from schemas.models.reset_token import ResetTokenDoc


class ResetTokenRepository(BaseRepository):
    async def insert(self, token: ResetTokenDoc) -> None:
        await self._col.insert_one(token.to_mongo())

    async def find_by_hash(self, email: str, token_hash: str) -> Optional[ResetTokenDoc]:
        doc = await self._col.find_one({"email": email, "token_hash": token_hash})
        return ResetTokenDoc.from_mongo(doc)

    async def claim(
        self, email: str, token_hash: str, now: datetime
    ) -> Optional[ResetTokenDoc]:
        """Atomically mark an unused, unexpired token as used.

        Returns the token as it was before the claim, or None when no usable
        token matched.
        """
        doc = await self._col.find_one_and_update(
            {
                "email": email,
                "token_hash": token_hash,
                "used": {"$ne": True},
                "expires_at": {"$gt": now},
            },
            {"$set": {"used": True, "used_at": now}},
            return_document=ReturnDocument.BEFORE,
        )
        return ResetTokenDoc.from_mongo(doc)

    async def release(self, email: str, token_hash: str) -> None:
        """Undo a claim whose password change did not go through."""
        await self._col.update_one(
            {"email": email, "token_hash": token_hash, "used": True},
            {"$set": {"used": False}, "$unset": {"used_at": ""}},
        )
