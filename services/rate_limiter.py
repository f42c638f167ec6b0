"""
Sliding-window rate limiting on durable MongoDB records.

Every allowed request appends one entry; the decision is a count of
entries for (identity, route) inside the trailing window. No counters live
in process memory, so limits hold across restarts and instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from pymongo.errors import PyMongoError

from errors import InternalError, RateLimitError
from repositories.rate_limit_repository import RateLimitRepository
from shared.datetime_utils import utcnow
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitPolicy:
    route: str
    limit: int
    window: timedelta
    # Unknown identity: proceed with a warning, or reject
    allow_unknown_identity: bool = True
    # Datastore error: block the request, or proceed with a warning
    fail_closed: bool = True
    message: str = "Too many requests. Please try again later."


class Limits:
    """Single source of truth for rate limit policies."""

    SEND_VERIFICATION = RateLimitPolicy(
        route="/api/auth/send-verification",
        limit=3,
        window=timedelta(minutes=15),
        message="Too many verification requests. Please try again later.",
    )
    # Shared with the search-suggestions service; no route in this app serves it
    SEARCH_SUGGESTIONS = RateLimitPolicy(
        route="/api/search-suggestions",
        limit=20,
        window=timedelta(minutes=1),
    )


class RateLimiter:
    def __init__(self, repo: RateLimitRepository) -> None:
        self._repo = repo

    async def hit(self, identity: Optional[str], policy: RateLimitPolicy) -> None:
        """Count this request against *policy* for *identity*.

        Raises:
            RateLimitError: the identity already used its budget for the
                window (the rejected request is not recorded), or the identity
                is unknown and the policy does not allow that.
            InternalError: the datastore failed and the policy fails closed.
        """
        if not identity:
            if policy.allow_unknown_identity:
                log.warning("rate_limit_identity_unknown", route=policy.route)
                return
            log.warning("rate_limit_identity_rejected", route=policy.route)
            raise RateLimitError("Unable to identify client for rate limiting.")

        now = utcnow()
        try:
            count = await self._repo.count_since(identity, policy.route, now - policy.window)
            if count >= policy.limit:
                log.warning(
                    "rate_limit_exceeded",
                    route=policy.route,
                    ip_hash=hash_ip(identity),
                    count=count,
                    limit=policy.limit,
                )
                raise RateLimitError(policy.message)
            await self._repo.record(identity, policy.route, now)
        except PyMongoError as e:
            log.error(
                "rate_limit_store_error",
                route=policy.route,
                ip_hash=hash_ip(identity),
                error=str(e),
                error_type=type(e).__name__,
                fail_closed=policy.fail_closed,
            )
            if policy.fail_closed:
                raise InternalError("Internal server error (rate limit check)") from e
