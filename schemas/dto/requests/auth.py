"""
Request DTOs for verification and password reset endpoints.

SendVerificationRequest  - POST /api/auth/send-verification
VerifyCodeRequest        - POST /api/auth/verify-code
ResetPasswordRequest     - POST /api/auth/reset-password
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from schemas.models.verification_code import VerificationPurpose
from shared.validators import normalize_email


class SendVerificationRequest(BaseModel):
    """Request body for POST /api/auth/send-verification.

    ``type`` defaults to ``password-reset``.
    """

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    email: EmailStr = ""
    purpose: VerificationPurpose = Field(
        default=VerificationPurpose.PASSWORD_RESET, alias="type"
    )

    @field_validator("email", mode="wrap")
    @classmethod
    def _valid_email(cls, v: object, handler: ValidatorFunctionWrapHandler) -> str:
        try:
            email = handler(v.strip() if isinstance(v, str) else v)
        except ValidationError:
            raise ValueError("Valid email is required") from None
        return normalize_email(email)


class VerifyCodeRequest(BaseModel):
    """Request body for POST /api/auth/verify-code.

    ``code`` is the 6-digit code sent to the email address.
    """

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    email: EmailStr = ""
    code: str = ""
    purpose: VerificationPurpose = Field(
        default=VerificationPurpose.PASSWORD_RESET, alias="type"
    )

    @field_validator("email", "code", mode="before")
    @classmethod
    def _required(cls, v: object) -> str:
        value = v.strip() if isinstance(v, str) else ""
        if not value:
            raise ValueError("Email and code are required")
        return value

    @field_validator("email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return normalize_email(v)


class ResetPasswordRequest(BaseModel):
    """Request body for POST /api/auth/reset-password."""

    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    email: EmailStr = ""
    password: str = ""
    token: str = ""

    @field_validator("email", "password", "token", mode="before")
    @classmethod
    def _required(cls, v: object, info: ValidationInfo) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Email, password, and reset token are required")
        return v.strip() if info.field_name == "email" else v

    @field_validator("email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return normalize_email(v)
