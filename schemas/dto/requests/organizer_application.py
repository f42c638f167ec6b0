"""
Request DTOs for organizer application endpoints.

SubmitApplicationRequest  - POST  /api/organizer-applications
ReviewApplicationRequest  - PATCH /api/organizer-applications/status/{id}

Field names follow the web client's camelCase JSON. The applicant's email is
never taken from the body; the session email is authoritative.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from schemas.models.organizer_application import ApplicantRole, ApplicationStatus
from shared.datetime_utils import age_on, parse_iso_date, utcnow

MIN_APPLICANT_AGE = 18
MIN_REASON_LENGTH = 50


def _non_blank(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


class SubmitApplicationRequest(BaseModel):
    """Request body for POST /api/organizer-applications."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(alias="fullName")
    phone: str
    date_of_birth: str = Field(alias="dateOfBirth")
    university: str
    department: str
    role: ApplicantRole
    year_of_study: Optional[str] = Field(default=None, alias="yearOfStudy")
    student_id: Optional[str] = Field(default=None, alias="studentId")
    experience: str
    reason: str
    skills: list[str]
    availability: str
    terms_accepted: bool = Field(alias="termsAccepted")
    newsletter_subscription: bool = Field(default=False, alias="newsletterSubscription")
    id_document: str = Field(alias="idDocument")
    profile_photo: str = Field(alias="profilePhoto")

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Full name is required and must be at least 3 characters.")
        return v

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        if not _non_blank(v):
            raise ValueError("A valid phone number is required.")
        return v.strip()

    @field_validator("date_of_birth")
    @classmethod
    def _date_of_birth(cls, v: str) -> str:
        born = parse_iso_date(v)
        if born is None:
            raise ValueError("Date of birth is required in YYYY-MM-DD format.")
        if age_on(born, utcnow()) < MIN_APPLICANT_AGE:
            raise ValueError("Applicant must be at least 18 years old.")
        return v

    @field_validator("university", "department", "experience", "availability")
    @classmethod
    def _required_text(cls, v: str, info) -> str:
        if not _non_blank(v):
            label = info.field_name.replace("_", " ").capitalize()
            raise ValueError(f"{label} is required.")
        return v.strip()

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        if len(v.strip()) < MIN_REASON_LENGTH:
            raise ValueError("Reason/motivation is required (min. 50 characters).")
        return v.strip()

    @field_validator("skills")
    @classmethod
    def _skills(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one skill must be selected.")
        return v

    @field_validator("terms_accepted")
    @classmethod
    def _terms(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must accept the terms and conditions.")
        return v

    @field_validator("id_document", "profile_photo")
    @classmethod
    def _upload(cls, v: str, info) -> str:
        if not _non_blank(v):
            label = "ID document" if info.field_name == "id_document" else "Profile photo"
            raise ValueError(f"{label} is required.")
        return v

    @model_validator(mode="after")
    def _student_fields(self) -> "SubmitApplicationRequest":
        if self.role is ApplicantRole.STUDENT:
            if not _non_blank(self.year_of_study):
                raise ValueError("Year of study is required for students.")
            if not _non_blank(self.student_id):
                raise ValueError("Student ID is required for students.")
        else:
            # Staff applications never carry student fields
            self.year_of_study = None
            self.student_id = None
        return self


class ReviewApplicationRequest(BaseModel):
    """Request body for the admin PATCH on an application's status."""

    model_config = ConfigDict(populate_by_name=True)

    status: ApplicationStatus
    feedback: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: object) -> object:
        allowed = [s.value for s in ApplicationStatus]
        if v not in allowed:
            raise ValueError(
                "Invalid status value. Must be one of: pending, accepted, rejected."
            )
        return v
