"""
Organizer applications: submission, applicant status lookups, admin review.

The session user is the only source of identity here. The applicant's email
and user id come from the session, never from the request body.
"""

from __future__ import annotations

from typing import Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId

from errors import (
    ConflictError,
    ForbiddenError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.templates import EmailTemplates
from repositories.organizer_application_repository import (
    OrganizerApplicationRepository,
)
from schemas.dto.requests.organizer_application import SubmitApplicationRequest
from schemas.dto.responses.organizer_application import (
    ApplicationStatusData,
    ApplicationVerifyResponse,
    SubmittedApplication,
)
from schemas.models.organizer_application import (
    ApplicationStatus,
    OrganizerApplicationDoc,
)
from shared.datetime_utils import utcnow
from shared.logging import get_logger
from shared.session import SessionUser

log = get_logger(__name__)

_VERIFY_MESSAGES = {
    ApplicationStatus.PENDING: "Your application is under review.",
    ApplicationStatus.ACCEPTED: "Your application has been accepted.",
    ApplicationStatus.REJECTED: "Your previous application was rejected. You may apply again.",
}


def ensure_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    if not current.can_transition_to(target):
        raise InvalidStatusTransitionError(
            f"Cannot change application status from {current.value} to {target.value}",
            details={"current": current.value, "requested": target.value},
        )


def _parse_id(application_id: str) -> ObjectId:
    try:
        return ObjectId(application_id)
    except (InvalidId, TypeError):
        raise ValidationError("Invalid application ID", field="id")


def _status_data(app: OrganizerApplicationDoc) -> ApplicationStatusData:
    return ApplicationStatusData(
        application_id=str(app.id),
        status=app.status.value,
        feedback=app.feedback or "",
        updated_at=app.updated_at,
    )


class OrganizerApplicationService:
    def __init__(
        self,
        repo: OrganizerApplicationRepository,
        email_provider: EmailProvider,
        templates: EmailTemplates,
    ) -> None:
        self._repo = repo
        self._email = email_provider
        self._templates = templates

    async def check_exists(self, email: str) -> Tuple[bool, Optional[str]]:
        latest_id = await self._repo.find_latest_id(email)
        if latest_id is None:
            return False, None
        return True, str(latest_id)

    async def verify_status(self, actor: SessionUser) -> ApplicationVerifyResponse:
        """Tell a returning applicant where to go next."""
        app = await self._repo.find_latest(actor.email, actor.user_id)
        if app is None:
            raise NotFoundError(
                "No application found",
                details={"should_redirect": "form"},
            )
        return ApplicationVerifyResponse(
            status=app.status.value,
            application_id=str(app.id),
            full_name=app.full_name,
            should_redirect=app.status.redirect_hint,
            message=_VERIFY_MESSAGES[app.status],
        )

    async def submit(
        self, actor: SessionUser, form: SubmitApplicationRequest
    ) -> SubmittedApplication:
        """Create a pending application for the session user.

        Raises:
            ConflictError: the user already has a pending or accepted
                application.
        """
        latest = await self._repo.find_latest(actor.email, actor.user_id)
        if latest is not None and not latest.status.allows_resubmission:
            log.info(
                "organizer_application_duplicate",
                user_id=actor.user_id,
                status=latest.status.value,
            )
            raise ConflictError(
                "You have already submitted an application",
                details={
                    "applicationId": str(latest.id),
                    "status": latest.status.value,
                },
            )

        now = utcnow()
        doc = OrganizerApplicationDoc(
            user_id=actor.user_id,
            email=actor.email,
            **form.model_dump(by_alias=False),
            status=ApplicationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        inserted_id = await self._repo.insert(doc)
        log.info("organizer_application_submitted", user_id=actor.user_id)
        return SubmittedApplication(
            application_id=str(inserted_id), status=ApplicationStatus.PENDING.value
        )

    async def get_status(
        self, application_id: str, actor: SessionUser
    ) -> ApplicationStatusData:
        app = await self._repo.find_by_id(_parse_id(application_id))
        if app is None:
            raise NotFoundError("Application not found")

        if not actor.is_admin:
            owns = (app.user_id is not None and app.user_id == actor.user_id) or (
                app.email == actor.email
            )
            if not owns:
                log.warning(
                    "organizer_application_access_denied",
                    user_id=actor.user_id,
                    application_id=application_id,
                )
                raise ForbiddenError("You do not have access to this application")
        return _status_data(app)

    async def get_status_by_email(
        self, email: str, actor: SessionUser
    ) -> ApplicationStatusData:
        if not actor.is_admin and email != actor.email:
            raise ForbiddenError("You can only view your own application status")
        app = await self._repo.find_latest(email)
        if app is None:
            raise NotFoundError("No application found for this email")
        return _status_data(app)

    async def review(
        self,
        application_id: str,
        actor: SessionUser,
        status: ApplicationStatus,
        feedback: Optional[str] = None,
    ) -> ApplicationStatusData:
        """Accept or reject a pending application (admins only)."""
        if not actor.is_admin:
            raise ForbiddenError("Only administrators can review applications")

        oid = _parse_id(application_id)
        app = await self._repo.find_by_id(oid)
        if app is None:
            raise NotFoundError("Application not found")

        ensure_transition(app.status, status)

        feedback = (feedback or "").strip()
        now = utcnow()
        updated = await self._repo.update_status(
            oid,
            expected=app.status,
            status=status,
            feedback=feedback,
            reviewed_by=actor.user_id,
            at=now,
        )
        if not updated:
            log.warning("organizer_application_review_conflict", application_id=application_id)
            raise InvalidStatusTransitionError(
                "Application was modified by another reviewer. Reload and try again."
            )

        log.info(
            "organizer_application_reviewed",
            application_id=application_id,
            status=status.value,
            reviewed_by=actor.user_id,
        )
        await self._notify_applicant(app, status, feedback)

        return ApplicationStatusData(
            application_id=application_id,
            status=status.value,
            feedback=feedback,
            updated_at=now,
        )

    async def _notify_applicant(
        self, app: OrganizerApplicationDoc, status: ApplicationStatus, feedback: str
    ) -> None:
        message = self._templates.application_status(
            app.email, app.full_name, status, feedback
        )
        result = await self._email.send(message)
        if not result.success:
            log.warning(
                "organizer_application_email_failed",
                application_id=str(app.id),
                error=result.error,
            )
