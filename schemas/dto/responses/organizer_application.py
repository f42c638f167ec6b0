"""
Response DTOs for organizer application endpoints.

ApplicationCheckResponse   - POST /api/organizer-applications/check
ApplicationVerifyResponse  - POST /api/organizer-applications/verify
ApplicationStatusResponse  - GET  /api/organizer-applications/status[/{id}]
ApplicationSubmitResponse  - POST /api/organizer-applications  (201)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplicationCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    exists: bool
    application_id: Optional[str] = Field(default=None, alias="applicationId")


class ApplicationVerifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    status: str
    application_id: str = Field(alias="applicationId")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    should_redirect: str = Field(alias="shouldRedirect")
    message: Optional[str] = None


class ApplicationStatusData(BaseModel):
    """Only the fields an applicant needs; no personal data is echoed back."""

    model_config = ConfigDict(populate_by_name=True)

    application_id: str = Field(alias="applicationId")
    status: str
    feedback: str = ""
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class ApplicationStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: ApplicationStatusData


class SubmittedApplication(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    application_id: str = Field(alias="applicationId")
    status: str


class ApplicationSubmitResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: SubmittedApplication
