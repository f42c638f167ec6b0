"""
User endpoints.

POST /api/users/status - whether an account is active (never cached)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from dependencies import get_user_service
from schemas.dto.requests.user import UserStatusRequest
from schemas.dto.responses.common import error_responses
from schemas.dto.responses.user import UserStatusResponse
from services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"], responses=error_responses(400, 500))

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.post("/status", response_model=UserStatusResponse)
async def user_status(
    body: UserStatusRequest,
    response: Response,
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserStatusResponse:
    response.headers.update(NO_CACHE_HEADERS)
    return UserStatusResponse(is_active=await service.is_active(body.email))
