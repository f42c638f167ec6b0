"""User account lookups that do not require a session."""

from __future__ import annotations

from repositories.user_repository import UserRepository
from shared.logging import get_logger

log = get_logger(__name__)


class UserService:
    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    async def is_active(self, email: str) -> bool:
        """Unknown users count as active; only an explicit ``is_active: False`` deactivates."""
        user = await self._repo.find_status(email)
        if user is None:
            return True
        if not user.active:
            log.info("user_status_inactive", user_id=str(user.id))
        return user.active
