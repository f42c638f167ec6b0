"""
Response DTOs for verification and password reset endpoints.

ResetTokenPayload    - reset token handed back after a password-reset verification
VerifyCodeResponse   - POST /api/auth/verify-code  (200)

send-verification and reset-password return the common MessageResponse.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ResetTokenPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    expires_in: str = Field(default="30 minutes", alias="expiresIn")
    expires_at: datetime = Field(alias="expiresAt")


class VerifyCodeResponse(BaseModel):
    """Response body for POST /api/auth/verify-code (200).

    reset_token is absent from the JSON for non-reset purposes
    (route handlers use exclude_none=True).
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    reset_token: Optional[ResetTokenPayload] = Field(default=None, alias="resetToken")
