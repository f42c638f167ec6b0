"""Repository for the `verification-codes` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from repositories.base import BaseRepository
from schemas.models.verification_code import VerificationCodeDoc, VerificationPurpose


def _key(email: str, purpose: VerificationPurpose) -> dict:
    return {"email": email, "purpose": purpose.value}


class VerificationCodeRepository(BaseRepository):
    async def upsert(
        self,
        email: str,
        purpose: VerificationPurpose,
        code_hash: str,
        expires_at: datetime,
        created_at: datetime,
    ) -> None:
        """Replace any existing code for (email, purpose) in a single atomic upsert."""
        await self._col.update_one(
            _key(email, purpose),
            {
                "$set": {
                    "code_hash": code_hash,
                    "expires_at": expires_at,
                    "attempts": 0,
                    "verified": False,
                    "verified_at": None,
                    "created_at": created_at,
                }
            },
            upsert=True,
        )

    async def get(
        self, email: str, purpose: VerificationPurpose
    ) -> Optional[VerificationCodeDoc]:
        doc = await self._col.find_one(_key(email, purpose))
        return VerificationCodeDoc.from_mongo(doc)

    async def increment_attempts(self, email: str, purpose: VerificationPurpose) -> None:
        await self._col.update_one(_key(email, purpose), {"$inc": {"attempts": 1}})

    async def mark_verified(
        self, email: str, purpose: VerificationPurpose, verified_at: datetime
    ) -> bool:
        """Flip verified to True. Returns False if another request got there first."""
        result = await self._col.update_one(
            {**_key(email, purpose), "verified": False},
            {"$set": {"verified": True, "verified_at": verified_at}},
        )
        return result.modified_count == 1

    async def delete(self, email: str, purpose: VerificationPurpose) -> bool:
        result = await self._col.delete_one(_key(email, purpose))
        return result.deleted_count == 1
