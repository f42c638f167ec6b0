"""
Organizer application endpoints. All require a session.

POST  /api/organizer-applications              - submit an application (201)
POST  /api/organizer-applications/check        - does the session user have one?
POST  /api/organizer-applications/verify       - redirect hint for returning applicants
GET   /api/organizer-applications/status       - latest status by ?email=
GET   /api/organizer-applications/status/{id}  - status of one application
PATCH /api/organizer-applications/status/{id}  - admin review
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from dependencies import CurrentUser, get_organizer_application_service
from errors import ValidationError
from schemas.dto.requests.organizer_application import (
    ReviewApplicationRequest,
    SubmitApplicationRequest,
)
from schemas.dto.responses.common import error_responses
from schemas.dto.responses.organizer_application import (
    ApplicationCheckResponse,
    ApplicationStatusResponse,
    ApplicationSubmitResponse,
    ApplicationVerifyResponse,
)
from services.organizer_application_service import OrganizerApplicationService
from shared.validators import normalize_email

router = APIRouter(
    prefix="/api/organizer-applications",
    tags=["organizer-applications"],
    responses=error_responses(400, 401, 403, 404, 409),
)

Service = Annotated[OrganizerApplicationService, Depends(get_organizer_application_service)]


@router.post("", response_model=ApplicationSubmitResponse, status_code=201)
async def submit_application(
    body: SubmitApplicationRequest, user: CurrentUser, service: Service
) -> ApplicationSubmitResponse:
    submitted = await service.submit(user, body)
    return ApplicationSubmitResponse(data=submitted)


@router.post("/check", response_model=ApplicationCheckResponse)
async def check_application(user: CurrentUser, service: Service) -> ApplicationCheckResponse:
    exists, application_id = await service.check_exists(user.email)
    return ApplicationCheckResponse(exists=exists, application_id=application_id)


@router.post("/verify", response_model=ApplicationVerifyResponse)
async def verify_application(user: CurrentUser, service: Service) -> ApplicationVerifyResponse:
    return await service.verify_status(user)


@router.get("/status", response_model=ApplicationStatusResponse)
async def application_status_by_email(
    user: CurrentUser,
    service: Service,
    email: Annotated[Optional[str], Query()] = None,
) -> ApplicationStatusResponse:
    if not email or not email.strip():
        raise ValidationError("Email is required", field="email")
    data = await service.get_status_by_email(normalize_email(email), user)
    return ApplicationStatusResponse(data=data)


@router.get("/status/{application_id}", response_model=ApplicationStatusResponse)
async def application_status(
    application_id: str, user: CurrentUser, service: Service
) -> ApplicationStatusResponse:
    data = await service.get_status(application_id, user)
    return ApplicationStatusResponse(data=data)


@router.patch("/status/{application_id}", response_model=ApplicationStatusResponse)
async def review_application(
    application_id: str,
    body: ReviewApplicationRequest,
    user: CurrentUser,
    service: Service,
) -> ApplicationStatusResponse:
    data = await service.review(application_id, user, body.status, body.feedback)
    return ApplicationStatusResponse(data=data)
