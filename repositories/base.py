"""
Base repository.

Each repository wraps exactly one async MongoDB collection. Repositories do
no error translation: pymongo errors propagate so the service layer can
choose between failing closed and degrading.
"""

from __future__ import annotations

from pymongo.asynchronous.collection import AsyncCollection


class BaseRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection
