"""
Organizer application document model and review state machine.

Maps to the `organizer-applications` MongoDB collection.

Status lifecycle:

    pending ──► accepted
       │
       └─────► rejected

Only an admin review moves an application, and only out of ``pending``.
``rejected`` lets the applicant submit a fresh application; ``accepted``
never reverts. All transition rules live in ``_TRANSITIONS``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from schemas.models.base import MongoBaseModel


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @property
    def allows_resubmission(self) -> bool:
        return self is ApplicationStatus.REJECTED

    @property
    def redirect_hint(self) -> str:
        """Where the client should send a returning applicant."""
        return _REDIRECTS[self]

    def can_transition_to(self, target: "ApplicationStatus") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset(
        {ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED}
    ),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
}

_REDIRECTS: dict[ApplicationStatus, str] = {
    ApplicationStatus.PENDING: "status",
    ApplicationStatus.ACCEPTED: "dashboard",
    ApplicationStatus.REJECTED: "form",
}


class ApplicantRole(str, Enum):
    STUDENT = "student"
    STAFF = "staff"


class OrganizerApplicationDoc(MongoBaseModel):
    """Document model for the `organizer-applications` collection.

    user_id is stored as the session's user id string. Older documents may
    lack it; ownership then falls back to the email.
    """

    user_id: Optional[str] = None
    email: str
    full_name: str
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    university: Optional[str] = None
    department: Optional[str] = None
    role: Optional[ApplicantRole] = None
    year_of_study: Optional[str] = None
    student_id: Optional[str] = None
    experience: Optional[str] = None
    reason: Optional[str] = None
    skills: list[str] = []
    availability: Optional[str] = None
    terms_accepted: bool = False
    newsletter_subscription: bool = False
    id_document: Optional[str] = None
    profile_photo: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.PENDING
    feedback: Optional[str] = None
    reviewed_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
