"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests. Tests control config exclusively through monkeypatch.setenv().

Also provides in-memory stand-ins for the repositories and the email
provider so service tests run without MongoDB or an SMTP relay.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest
from bson import ObjectId

from infrastructure.email.protocol import EmailResult, OutgoingEmail
from infrastructure.email.templates import EmailTemplates
from schemas.models.organizer_application import OrganizerApplicationDoc
from schemas.models.reset_token import ResetTokenDoc
from schemas.models.user import UserDoc
from schemas.models.verification_code import VerificationCodeDoc, VerificationPurpose
from shared.datetime_utils import ensure_utc


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


# ── Fakes ─────────────────────────────────────────────────────────────────────


class FakeVerificationCodeRepo:
    def __init__(self) -> None:
        self.docs: dict[tuple[str, VerificationPurpose], VerificationCodeDoc] = {}
        self.upserts = 0

    async def upsert(self, email, purpose, code_hash, expires_at, created_at) -> None:
        self.upserts += 1
        existing = self.docs.get((email, purpose))
        self.docs[(email, purpose)] = VerificationCodeDoc(
            _id=existing.id if existing else ObjectId(),
            email=email,
            purpose=purpose,
            code_hash=code_hash,
            expires_at=expires_at,
            created_at=created_at,
        )

    async def get(self, email, purpose) -> Optional[VerificationCodeDoc]:
        doc = self.docs.get((email, purpose))
        return doc.model_copy() if doc else None

    async def increment_attempts(self, email, purpose) -> None:
        doc = self.docs.get((email, purpose))
        if doc:
            doc.attempts += 1

    async def mark_verified(self, email, purpose, verified_at) -> bool:
        doc = self.docs.get((email, purpose))
        if doc is None or doc.verified:
            return False
        doc.verified = True
        doc.verified_at = verified_at
        return True

    async def delete(self, email, purpose) -> bool:
        return self.docs.pop((email, purpose), None) is not None


class FakeResetTokenRepo:
    def __init__(self) -> None:
        self.docs: list[ResetTokenDoc] = []

    async def insert(self, token: ResetTokenDoc) -> None:
        self.docs.append(token.model_copy(update={"id": ObjectId()}))

    async def find_by_hash(self, email, token_hash) -> Optional[ResetTokenDoc]:
        for doc in self.docs:
            if doc.email == email and doc.token_hash == token_hash:
                return doc
        return None

    async def claim(self, email, token_hash, now) -> Optional[ResetTokenDoc]:
        doc = await self.find_by_hash(email, token_hash)
        if doc is None or doc.used or ensure_utc(doc.expires_at) <= now:
            return None
        before = doc.model_copy()
        doc.used = True
        doc.used_at = now
        return before

    async def release(self, email, token_hash) -> None:
        doc = await self.find_by_hash(email, token_hash)
        if doc is not None:
            doc.used = False
            doc.used_at = None


class FakeUserRepo:
    def __init__(self) -> None:
        self.users: dict[str, dict] = {}

    def add(self, email: str, **fields) -> dict:
        doc = {"_id": ObjectId(), "email": email, "password_history": [], **fields}
        self.users[email] = doc
        return doc

    async def exists(self, email) -> bool:
        return email in self.users

    async def find_status(self, email) -> Optional[UserDoc]:
        doc = self.users.get(email)
        if doc is None:
            return None
        return UserDoc(
            _id=doc["_id"], email=doc["email"], is_active=doc.get("is_active")
        )

    async def update_password(self, email, password_hash, changed_at) -> bool:
        doc = self.users.get(email)
        if doc is None:
            return False
        doc["password_hash"] = password_hash
        doc["updated_at"] = changed_at
        doc["password_history"].append(
            {"password_hash": password_hash, "changed_at": changed_at}
        )
        return True


class FakeRateLimitRepo:
    def __init__(self) -> None:
        self.entries: list[tuple[str, str, datetime]] = []
        self.fail_with: Optional[Exception] = None

    async def count_since(self, ip, route, since) -> int:
        if self.fail_with:
            raise self.fail_with
        return sum(1 for i, r, t in self.entries if i == ip and r == route and t >= since)

    async def record(self, ip, route, at) -> None:
        if self.fail_with:
            raise self.fail_with
        self.entries.append((ip, route, at))


class FakeApplicationRepo:
    def __init__(self) -> None:
        self.docs: list[OrganizerApplicationDoc] = []

    def add(self, **fields) -> OrganizerApplicationDoc:
        fields.setdefault("full_name", "Jane Doe")
        doc = OrganizerApplicationDoc(_id=ObjectId(), **fields)
        self.docs.append(doc)
        return doc

    def _latest(self, matches) -> Optional[OrganizerApplicationDoc]:
        found = [d for d in self.docs if matches(d)]
        if not found:
            return None
        return max(found, key=lambda d: (d.created_at is not None, d.created_at))

    async def insert(self, application: OrganizerApplicationDoc) -> ObjectId:
        new_id = ObjectId()
        self.docs.append(application.model_copy(update={"id": new_id}))
        return new_id

    async def find_by_id(self, application_id) -> Optional[OrganizerApplicationDoc]:
        for doc in self.docs:
            if doc.id == application_id:
                return doc.model_copy()
        return None

    async def find_latest_id(self, email) -> Optional[ObjectId]:
        doc = self._latest(lambda d: d.email == email)
        return doc.id if doc else None

    async def find_latest(self, email, user_id=None) -> Optional[OrganizerApplicationDoc]:
        doc = self._latest(
            lambda d: d.email == email or (user_id is not None and d.user_id == user_id)
        )
        return doc.model_copy() if doc else None

    async def update_status(
        self, application_id, expected, status, feedback, reviewed_by, at
    ) -> bool:
        for doc in self.docs:
            if doc.id == application_id and doc.status is expected:
                doc.status = status
                doc.feedback = feedback
                doc.reviewed_by = reviewed_by
                doc.updated_at = at
                return True
        return False


class FakeEmailProvider:
    def __init__(self, result: Optional[EmailResult] = None) -> None:
        self.sent: list[OutgoingEmail] = []
        self.result = result or EmailResult(success=True)

    def fail(self, error: str = "Failed to send email: relay down") -> None:
        self.result = replace(self.result, success=False, error=error)

    async def send(self, message: OutgoingEmail) -> EmailResult:
        self.sent.append(message)
        return self.result


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def code_repo():
    return FakeVerificationCodeRepo()


@pytest.fixture
def reset_token_repo():
    return FakeResetTokenRepo()


@pytest.fixture
def user_repo():
    return FakeUserRepo()


@pytest.fixture
def rate_limit_repo():
    return FakeRateLimitRepo()


@pytest.fixture
def application_repo():
    return FakeApplicationRepo()


@pytest.fixture
def email_provider():
    return FakeEmailProvider()


@pytest.fixture
def email_templates():
    return EmailTemplates(app_url="https://events.example.com")
