"""Repository for the `organizer-applications` collection."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import DESCENDING

from repositories.base import BaseRepository
from schemas.models.organizer_application import (
    ApplicationStatus,
    OrganizerApplicationDoc,
)

_LATEST_FIRST = [("created_at", DESCENDING)]


class OrganizerApplicationRepository(BaseRepository):
    async def insert(self, application: OrganizerApplicationDoc) -> ObjectId:
        result = await self._col.insert_one(application.to_mongo())
        return result.inserted_id

    async def find_by_id(self, application_id: ObjectId) -> Optional[OrganizerApplicationDoc]:
        doc = await self._col.find_one({"_id": application_id})
        return OrganizerApplicationDoc.from_mongo(doc)

    async def find_latest_id(self, email: str) -> Optional[ObjectId]:
        doc = await self._col.find_one(
            {"email": email}, {"_id": 1}, sort=_LATEST_FIRST
        )
        return doc["_id"] if doc else None

    async def find_latest(
        self, email: str, user_id: Optional[str] = None
    ) -> Optional[OrganizerApplicationDoc]:
        """Most recent application submitted by this email (or user id)."""
        query: dict = {"email": email}
        if user_id:
            query = {"$or": [{"email": email}, {"user_id": user_id}]}
        doc = await self._col.find_one(query, sort=_LATEST_FIRST)
        return OrganizerApplicationDoc.from_mongo(doc)

    async def update_status(
        self,
        application_id: ObjectId,
        expected: ApplicationStatus,
        status: ApplicationStatus,
        feedback: str,
        reviewed_by: str,
        at: datetime,
    ) -> bool:
        """Apply a review only if the status is still *expected*.

        Returns False when the document changed underneath the reviewer.
        """
        result = await self._col.update_one(
            {"_id": application_id, "status": expected.value},
            {
                "$set": {
                    "status": status.value,
                    "feedback": feedback,
                    "reviewed_by": reviewed_by,
                    "updated_at": at,
                }
            },
        )
        return result.modified_count == 1
