"""
Password reset tokens and the password change that consumes them.

ResetTokenService     - issue / consume / release single-use reset tokens
PasswordResetService  - POST /api/auth/reset-password
"""

from __future__ import annotations

from datetime import timedelta

from errors import InvalidResetTokenError, NotFoundError, ValidationError
from repositories.reset_token_repository import ResetTokenRepository
from repositories.user_repository import UserRepository
from repositories.verification_code_repository import VerificationCodeRepository
from schemas.dto.responses.auth import ResetTokenPayload
from schemas.models.reset_token import RESET_TOKEN_TTL_SECONDS, ResetTokenDoc
from schemas.models.verification_code import VerificationPurpose
from shared.crypto import hash_password, hash_token
from shared.datetime_utils import ensure_utc, utcnow
from shared.generators import generate_reset_token
from shared.logging import get_logger
from shared.validators import validate_password

log = get_logger(__name__)


class ResetTokenService:
    def __init__(self, repo: ResetTokenRepository) -> None:
        self._repo = repo

    async def issue(self, email: str) -> ResetTokenPayload:
        """Create a reset token for *email*. Only the SHA-256 hash is stored."""
        token = generate_reset_token()
        now = utcnow()
        expires_at = now + timedelta(seconds=RESET_TOKEN_TTL_SECONDS)
        await self._repo.insert(
            ResetTokenDoc(
                email=email,
                token_hash=hash_token(token),
                expires_at=expires_at,
                created_at=now,
            )
        )
        log.info("reset_token_issued", expires_at=expires_at.isoformat())
        return ResetTokenPayload(
            token=token,
            expires_in=f"{RESET_TOKEN_TTL_SECONDS // 60} minutes",
            expires_at=expires_at,
        )

    async def consume(self, email: str, token: str) -> None:
        """Claim *token* for *email* exactly once.

        Raises:
            InvalidResetTokenError: unknown, already used, or expired token.
        """
        token_hash = hash_token(token)
        now = utcnow()
        if await self._repo.claim(email, token_hash, now) is not None:
            return

        existing = await self._repo.find_by_hash(email, token_hash)
        if existing is None:
            raise InvalidResetTokenError("Invalid or expired reset token")
        if existing.used:
            log.warning("reset_token_reused")
            raise InvalidResetTokenError("Reset token has already been used")
        if ensure_utc(existing.expires_at) <= now:
            raise InvalidResetTokenError("Reset token has expired")
        raise InvalidResetTokenError("Invalid or expired reset token")

    async def release(self, email: str, token: str) -> None:
        """Make a consumed *token* usable again."""
        await self._repo.release(email, hash_token(token))
        log.info("reset_token_released")


class PasswordResetService:
    def __init__(
        self,
        tokens: ResetTokenService,
        users: UserRepository,
        codes: VerificationCodeRepository,
    ) -> None:
        self._tokens = tokens
        self._users = users
        self._codes = codes

    async def reset_password(self, email: str, password: str, token: str) -> None:
        ok, missing = validate_password(password)
        if not ok:
            raise ValidationError(
                "Password does not meet strength requirements",
                field="password",
                details={"missing": missing},
            )

        await self._tokens.consume(email, token)

        # The token stays usable until the new password is stored
        try:
            updated = await self._users.update_password(
                email, hash_password(password), utcnow()
            )
        except Exception:
            await self._tokens.release(email, token)
            raise
        if not updated:
            await self._tokens.release(email, token)
            log.warning("password_reset_user_missing")
            raise NotFoundError("User not found")

        # The code that produced this token can no longer be replayed
        await self._codes.delete(email, VerificationPurpose.PASSWORD_RESET)
        log.info("password_reset_completed")
