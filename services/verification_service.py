"""
Verification codes: issue, email, and check one-time 6-digit codes.

At most one live code exists per (email, purpose). Requesting a new code
overwrites the previous one and resets its attempt counter. A code allows
MAX_VERIFICATION_ATTEMPTS wrong guesses and verifies at most once.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from pymongo.errors import PyMongoError

from errors import (
    InternalError,
    InvalidVerificationCodeError,
    MaxAttemptsExceededError,
    UpstreamServiceError,
    VerificationCodeExpiredError,
    VerificationCodeNotFoundError,
    VerificationCodeUsedError,
)
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.templates import EmailTemplates
from repositories.user_repository import UserRepository
from repositories.verification_code_repository import VerificationCodeRepository
from schemas.dto.responses.auth import ResetTokenPayload
from schemas.models.verification_code import (
    CODE_TTL_SECONDS,
    MAX_VERIFICATION_ATTEMPTS,
    VerificationPurpose,
)
from services.reset_token_service import ResetTokenService
from shared.crypto import hash_token, token_matches
from shared.datetime_utils import ensure_utc, utcnow
from shared.generators import generate_verification_code
from shared.logging import get_logger

log = get_logger(__name__)

CODE_SENT_MESSAGE = "Verification code sent successfully"
UNKNOWN_ACCOUNT_MESSAGE = (
    "If an account with that email exists, a verification code has been sent."
)


@dataclass(frozen=True)
class VerificationResult:
    verified: bool
    reset_token: Optional[ResetTokenPayload] = None


class VerificationService:
    def __init__(
        self,
        codes: VerificationCodeRepository,
        users: UserRepository,
        email_provider: EmailProvider,
        templates: EmailTemplates,
        reset_tokens: ResetTokenService,
    ) -> None:
        self._codes = codes
        self._users = users
        self._email = email_provider
        self._templates = templates
        self._reset_tokens = reset_tokens

    async def issue(self, email: str, purpose: VerificationPurpose) -> str:
        """Store a fresh code for (email, purpose) and return it in plain text.

        Overwrites any previous code, so the older one stops verifying.
        """
        code = generate_verification_code()
        now = utcnow()
        await self._codes.upsert(
            email,
            purpose,
            code_hash=hash_token(code),
            expires_at=now + timedelta(seconds=CODE_TTL_SECONDS),
            created_at=now,
        )
        return code

    async def send_verification(self, email: str, purpose: VerificationPurpose) -> str:
        """Issue a code and email it. Returns the user-facing message.

        For password resets an unknown email gets the same generic answer
        as a known one, and no code is stored.

        Raises:
            InternalError: the code could not be stored.
            UpstreamServiceError: the email could not be sent. The stored
                code is removed first.
        """
        if purpose is VerificationPurpose.PASSWORD_RESET:
            if not await self._users.exists(email):
                log.info("verification_skipped_unknown_account", purpose=purpose.value)
                return UNKNOWN_ACCOUNT_MESSAGE

        try:
            code = await self.issue(email, purpose)
        except PyMongoError as e:
            log.error(
                "verification_code_store_failed",
                purpose=purpose.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise InternalError("Failed to store verification code") from e

        message = self._templates.verification_code(
            email, code, purpose, ttl_minutes=CODE_TTL_SECONDS // 60
        )
        result = await self._email.send(message)
        if not result.success:
            await self._codes.delete(email, purpose)
            log.warning("verification_code_dispatch_failed", purpose=purpose.value)
            raise UpstreamServiceError(result.error or "Failed to send verification email")

        log.info("verification_code_sent", purpose=purpose.value)
        return CODE_SENT_MESSAGE

    async def verify(
        self, email: str, code: str, purpose: VerificationPurpose
    ) -> VerificationResult:
        """Check *code* against the stored code for (email, purpose).

        Checks run in a fixed order: missing, attempts exhausted, expired,
        already verified, mismatch. A mismatch consumes one attempt. A
        password-reset match also issues a reset token.
        """
        record = await self._codes.get(email, purpose)
        if record is None:
            raise VerificationCodeNotFoundError(
                "No verification code found. Please request a new code."
            )

        if record.attempts >= MAX_VERIFICATION_ATTEMPTS:
            raise MaxAttemptsExceededError(
                "Maximum verification attempts exceeded. Please request a new code."
            )

        if ensure_utc(record.expires_at) < utcnow():
            raise VerificationCodeExpiredError(
                "Verification code has expired. Please request a new code."
            )

        if record.verified:
            raise VerificationCodeUsedError("Verification code has already been used")

        if not token_matches(code, record.code_hash):
            await self._codes.increment_attempts(email, purpose)
            remaining = max(0, MAX_VERIFICATION_ATTEMPTS - record.attempts - 1)
            log.info(
                "verification_code_mismatch",
                purpose=purpose.value,
                remaining_attempts=remaining,
            )
            raise InvalidVerificationCodeError(
                f"Invalid verification code. {remaining} attempts remaining.",
                remaining_attempts=remaining,
            )

        # The code is only spent once its reset token is stored
        reset_token = None
        if purpose is VerificationPurpose.PASSWORD_RESET:
            reset_token = await self._reset_tokens.issue(email)

        if not await self._codes.mark_verified(email, purpose, utcnow()):
            # A concurrent request verified the same code first
            raise VerificationCodeUsedError("Verification code has already been used")

        log.info("verification_code_verified", purpose=purpose.value)
        return VerificationResult(verified=True, reset_token=reset_token)
