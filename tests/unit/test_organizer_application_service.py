"""Unit tests for OrganizerApplicationService."""

from datetime import timedelta

import pytest
from bson import ObjectId

from errors import (
    ConflictError,
    ForbiddenError,
    InvalidStatusTransitionError,
    NotFoundError,
    ValidationError,
)
from schemas.dto.requests.organizer_application import SubmitApplicationRequest
from schemas.models.organizer_application import ApplicationStatus
from services.organizer_application_service import (
    OrganizerApplicationService,
    ensure_transition,
)
from shared.datetime_utils import utcnow
from shared.session import SessionUser

APPLICANT = SessionUser(user_id="user-1", email="jane@example.com")
STRANGER = SessionUser(user_id="user-2", email="mallory@example.com")
ADMIN = SessionUser(user_id="admin-1", email="admin@example.com", role="admin")


@pytest.fixture
def service(application_repo, email_provider, email_templates):
    return OrganizerApplicationService(application_repo, email_provider, email_templates)


@pytest.fixture
def form():
    return SubmitApplicationRequest.model_validate(
        {
            "fullName": "Jane Doe",
            "phone": "+1 555 0100",
            "dateOfBirth": "1995-04-12",
            "university": "State University",
            "department": "Computer Science",
            "role": "staff",
            "experience": "Ran the campus hackathon for two years.",
            "reason": "I want to organize workshops that help first-year students find mentors.",
            "skills": ["logistics"],
            "availability": "Weekends",
            "termsAccepted": True,
            "idDocument": "https://files.example.com/id.png",
            "profilePhoto": "https://files.example.com/me.png",
        }
    )


def _add(repo, status=ApplicationStatus.PENDING, **fields):
    fields.setdefault("email", APPLICANT.email)
    fields.setdefault("user_id", APPLICANT.user_id)
    fields.setdefault("created_at", utcnow())
    return repo.add(status=status, **fields)


# ── ensure_transition ─────────────────────────────────────────────────────────


def test_ensure_transition_allows_review_of_pending():
    ensure_transition(ApplicationStatus.PENDING, ApplicationStatus.ACCEPTED)
    ensure_transition(ApplicationStatus.PENDING, ApplicationStatus.REJECTED)


@pytest.mark.parametrize(
    "current, target",
    [
        (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED),
        (ApplicationStatus.REJECTED, ApplicationStatus.ACCEPTED),
        (ApplicationStatus.PENDING, ApplicationStatus.PENDING),
    ],
)
def test_ensure_transition_rejects(current, target):
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        ensure_transition(current, target)
    assert exc_info.value.status_code == 409


# ── check / verify ────────────────────────────────────────────────────────────


class TestCheckAndVerify:
    async def test_check_none(self, service):
        assert await service.check_exists(APPLICANT.email) == (False, None)

    async def test_check_returns_latest(self, service, application_repo):
        _add(application_repo, created_at=utcnow() - timedelta(days=3))
        newest = _add(application_repo, status=ApplicationStatus.REJECTED)
        assert await service.check_exists(APPLICANT.email) == (True, str(newest.id))

    @pytest.mark.parametrize(
        "status, hint",
        [
            (ApplicationStatus.PENDING, "status"),
            (ApplicationStatus.ACCEPTED, "dashboard"),
            (ApplicationStatus.REJECTED, "form"),
        ],
    )
    async def test_verify_redirect(self, service, application_repo, status, hint):
        app = _add(application_repo, status=status)
        resp = await service.verify_status(APPLICANT)
        assert resp.should_redirect == hint
        assert resp.application_id == str(app.id)
        assert resp.status == status.value
        assert resp.full_name == "Jane Doe"

    async def test_verify_none_points_to_form(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.verify_status(APPLICANT)
        assert exc_info.value.details == {"should_redirect": "form"}

    async def test_verify_matches_user_id_after_email_change(self, service, application_repo):
        _add(application_repo, email="old@example.com")
        resp = await service.verify_status(APPLICANT)
        assert resp.should_redirect == "status"


# ── submit ────────────────────────────────────────────────────────────────────


class TestSubmit:
    async def test_first_submission(self, service, application_repo, form):
        submitted = await service.submit(APPLICANT, form)
        assert submitted.status == "pending"

        stored = application_repo.docs[0]
        assert str(stored.id) == submitted.application_id
        assert stored.email == APPLICANT.email
        assert stored.user_id == APPLICANT.user_id
        assert stored.status is ApplicationStatus.PENDING
        assert stored.created_at is not None
        assert stored.created_at == stored.updated_at
        assert stored.skills == ["logistics"]

    @pytest.mark.parametrize("status", [ApplicationStatus.PENDING, ApplicationStatus.ACCEPTED])
    async def test_duplicate_rejected(self, service, application_repo, form, status):
        existing = _add(application_repo, status=status)
        with pytest.raises(ConflictError) as exc_info:
            await service.submit(APPLICANT, form)
        assert exc_info.value.details == {
            "applicationId": str(existing.id),
            "status": status.value,
        }
        assert len(application_repo.docs) == 1

    async def test_resubmit_after_rejection(self, service, application_repo, form):
        _add(application_repo, status=ApplicationStatus.REJECTED, created_at=utcnow() - timedelta(days=1))
        await service.submit(APPLICANT, form)
        assert len(application_repo.docs) == 2


# ── status lookups ────────────────────────────────────────────────────────────


class TestGetStatus:
    async def test_invalid_id(self, service):
        with pytest.raises(ValidationError):
            await service.get_status("not-an-id", APPLICANT)

    async def test_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.get_status(str(ObjectId()), APPLICANT)

    async def test_owner_by_user_id(self, service, application_repo):
        app = _add(application_repo, email="other@example.com", feedback="Looks good")
        data = await service.get_status(str(app.id), APPLICANT)
        assert data.status == "pending"
        assert data.feedback == "Looks good"

    async def test_legacy_owner_by_email(self, service, application_repo):
        app = _add(application_repo, user_id=None)
        data = await service.get_status(str(app.id), APPLICANT)
        assert data.application_id == str(app.id)

    async def test_stranger_forbidden(self, service, application_repo):
        app = _add(application_repo)
        with pytest.raises(ForbiddenError):
            await service.get_status(str(app.id), STRANGER)

    async def test_admin_sees_any(self, service, application_repo):
        app = _add(application_repo)
        data = await service.get_status(str(app.id), ADMIN)
        assert data.feedback == ""

    async def test_by_email_own(self, service, application_repo):
        app = _add(application_repo)
        data = await service.get_status_by_email(APPLICANT.email, APPLICANT)
        assert data.application_id == str(app.id)

    async def test_by_email_other_forbidden(self, service, application_repo):
        _add(application_repo)
        with pytest.raises(ForbiddenError):
            await service.get_status_by_email(APPLICANT.email, STRANGER)

    async def test_by_email_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.get_status_by_email(APPLICANT.email, ADMIN)


# ── review ────────────────────────────────────────────────────────────────────


class TestReview:
    async def test_non_admin_forbidden(self, service, application_repo):
        app = _add(application_repo)
        with pytest.raises(ForbiddenError):
            await service.review(str(app.id), APPLICANT, ApplicationStatus.ACCEPTED)

    async def test_accept_pending(self, service, application_repo, email_provider):
        app = _add(application_repo)
        data = await service.review(
            str(app.id), ADMIN, ApplicationStatus.ACCEPTED, "  Welcome aboard  "
        )

        assert data.status == "accepted"
        assert data.feedback == "Welcome aboard"
        stored = application_repo.docs[0]
        assert stored.status is ApplicationStatus.ACCEPTED
        assert stored.reviewed_by == ADMIN.user_id

        sent = email_provider.sent[0]
        assert sent.to == APPLICANT.email
        assert "accepted" in sent.subject

    async def test_terminal_status_cannot_change(self, service, application_repo, email_provider):
        app = _add(application_repo, status=ApplicationStatus.ACCEPTED)
        with pytest.raises(InvalidStatusTransitionError):
            await service.review(str(app.id), ADMIN, ApplicationStatus.REJECTED)
        assert application_repo.docs[0].status is ApplicationStatus.ACCEPTED
        assert email_provider.sent == []

    async def test_concurrent_review_conflict(self, service, application_repo, mocker):
        app = _add(application_repo)
        mocker.patch.object(application_repo, "update_status", return_value=False)
        with pytest.raises(InvalidStatusTransitionError):
            await service.review(str(app.id), ADMIN, ApplicationStatus.REJECTED)

    async def test_email_failure_does_not_fail_review(
        self, service, application_repo, email_provider
    ):
        email_provider.fail()
        app = _add(application_repo)
        data = await service.review(str(app.id), ADMIN, ApplicationStatus.REJECTED)
        assert data.status == "rejected"
        assert application_repo.docs[0].status is ApplicationStatus.REJECTED

    async def test_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.review(str(ObjectId()), ADMIN, ApplicationStatus.ACCEPTED)

    async def test_invalid_id(self, service):
        with pytest.raises(ValidationError):
            await service.review("xyz", ADMIN, ApplicationStatus.ACCEPTED)
