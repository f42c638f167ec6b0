"""
Verification code and password reset endpoints.

POST /api/auth/send-verification  - email a 6-digit code (rate limited)
POST /api/auth/verify-code        - check a code; password-reset codes yield a reset token
POST /api/auth/reset-password     - set a new password with a reset token
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from dependencies import (
    get_password_reset_service,
    get_rate_limiter,
    get_verification_service,
)
from schemas.dto.requests.auth import (
    ResetPasswordRequest,
    SendVerificationRequest,
    VerifyCodeRequest,
)
from schemas.dto.responses.auth import VerifyCodeResponse
from schemas.dto.responses.common import MessageResponse, error_responses
from services.rate_limiter import Limits, RateLimiter
from services.reset_token_service import PasswordResetService
from services.verification_service import VerificationService
from shared.ip_utils import resolve_client_identity

router = APIRouter(
    prefix="/api/auth", tags=["auth"], responses=error_responses(400, 429, 500)
)


@router.post("/send-verification", response_model=MessageResponse)
async def send_verification(
    request: Request,
    body: SendVerificationRequest,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    service: Annotated[VerificationService, Depends(get_verification_service)],
) -> MessageResponse:
    await limiter.hit(resolve_client_identity(request), Limits.SEND_VERIFICATION)
    message = await service.send_verification(body.email, body.purpose)
    return MessageResponse(success=True, message=message)


@router.post(
    "/verify-code",
    response_model=VerifyCodeResponse,
    response_model_exclude_none=True,
)
async def verify_code(
    body: VerifyCodeRequest,
    service: Annotated[VerificationService, Depends(get_verification_service)],
) -> VerifyCodeResponse:
    result = await service.verify(body.email, body.code, body.purpose)
    return VerifyCodeResponse(success=result.verified, reset_token=result.reset_token)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    body: ResetPasswordRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
) -> MessageResponse:
    await service.reset_password(body.email, body.password, body.token)
    return MessageResponse(success=True, message="Password has been reset successfully")
