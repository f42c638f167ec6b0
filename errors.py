"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses.

Non-AppError exceptions bubble up as 500s (with Sentry reporting in production).
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class AuthenticationError(AppError):
    status_code = 401
    error_code = "authentication_error"


class ForbiddenError(AppError):
    status_code = 403
    error_code = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class ConflictError(AppError):
    status_code = 409
    error_code = "conflict"


class RateLimitError(AppError):
    status_code = 429
    error_code = "rate_limit_exceeded"


class UpstreamServiceError(AppError):
    """An external provider (SMTP relay, upload service) failed."""

    status_code = 500
    error_code = "upstream_service_error"


class InternalError(AppError):
    status_code = 500
    error_code = "internal_error"


# ── Verification failures (all surface as 400) ───────────────────────────────


class VerificationCodeNotFoundError(ValidationError):
    error_code = "verification_code_not_found"


class MaxAttemptsExceededError(ValidationError):
    error_code = "max_attempts_exceeded"


class VerificationCodeExpiredError(ValidationError):
    error_code = "verification_code_expired"


class VerificationCodeUsedError(ValidationError):
    error_code = "verification_code_used"


class InvalidVerificationCodeError(ValidationError):
    error_code = "invalid_verification_code"

    def __init__(self, message: str, *, remaining_attempts: int) -> None:
        super().__init__(message, details={"remaining_attempts": remaining_attempts})
        self.remaining_attempts = remaining_attempts


class InvalidResetTokenError(ValidationError):
    error_code = "invalid_reset_token"


class InvalidStatusTransitionError(ConflictError):
    error_code = "invalid_status_transition"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error(
                "request_failed",
                path=request.url.path,
                error_code=exc.error_code,
                error=exc.message,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        loc = [str(part) for part in first.get("loc", ()) if part != "body"]
        message = first.get("msg", "Invalid request body")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        err = ValidationError(message, field=".".join(loc) or None)
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.exception(
            "unhandled_exception",
            path=request.url.path,
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
