"""Repository for the `users` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from repositories.base import BaseRepository
from schemas.models.user import UserDoc


class UserRepository(BaseRepository):
    async def exists(self, email: str) -> bool:
        return await self._col.find_one({"email": email}, {"_id": 1}) is not None

    async def find_status(self, email: str) -> Optional[UserDoc]:
        """Only the fields needed to decide whether the account is active."""
        doc = await self._col.find_one(
            {"email": email}, {"_id": 1, "email": 1, "is_active": 1}
        )
        return UserDoc.from_mongo(doc)

    async def update_password(
        self, email: str, password_hash: str, changed_at: datetime
    ) -> bool:
        """Set a new password and append it to the history. False if no such user."""
        result = await self._col.update_one(
            {"email": email},
            {
                "$set": {"password_hash": password_hash, "updated_at": changed_at},
                "$push": {
                    "password_history": {
                        "password_hash": password_hash,
                        "changed_at": changed_at,
                    }
                },
            },
        )
        return result.matched_count > 0
