"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived clients (database, email provider,
templates) live on app.state and are created in the app lifespan;
repositories and services are cheap and built per request.
"""

from __future__ import annotations

from typing import Annotated, Optional

import jwt
from fastapi import Cookie, Depends, Header, Request
from pymongo.asynchronous.database import AsyncDatabase

from config import AppSettings
from errors import AuthenticationError
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.templates import EmailTemplates
from repositories.indexes import (
    ORGANIZER_APPLICATIONS,
    RATE_LIMITS,
    RESET_TOKENS,
    USERS,
    VERIFICATION_CODES,
)
from repositories.organizer_application_repository import (
    OrganizerApplicationRepository,
)
from repositories.rate_limit_repository import RateLimitRepository
from repositories.reset_token_repository import ResetTokenRepository
from repositories.user_repository import UserRepository
from repositories.verification_code_repository import VerificationCodeRepository
from services.organizer_application_service import OrganizerApplicationService
from services.rate_limiter import RateLimiter
from services.reset_token_service import PasswordResetService, ResetTokenService
from services.user_service import UserService
from services.verification_service import VerificationService
from shared.jwt_utils import decode_access_token, extract_bearer_token
from shared.logging import get_logger
from shared.session import SessionUser

log = get_logger(__name__)


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request) -> AsyncDatabase:
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_email_provider(request: Request) -> EmailProvider:
    return request.app.state.email_provider


def get_email_templates(request: Request) -> EmailTemplates:
    return request.app.state.email_templates


Db = Annotated[AsyncDatabase, Depends(get_db)]


# ── Repositories ─────────────────────────────────────────────────────────────


def get_rate_limit_repo(db: Db) -> RateLimitRepository:
    return RateLimitRepository(db[RATE_LIMITS])


def get_verification_code_repo(db: Db) -> VerificationCodeRepository:
    return VerificationCodeRepository(db[VERIFICATION_CODES])


def get_reset_token_repo(db: Db) -> ResetTokenRepository:
    return ResetTokenRepository(db[RESET_TOKENS])


def get_user_repo(db: Db) -> UserRepository:
    return UserRepository(db[USERS])


def get_organizer_application_repo(db: Db) -> OrganizerApplicationRepository:
    return OrganizerApplicationRepository(db[ORGANIZER_APPLICATIONS])


# ── Services ─────────────────────────────────────────────────────────────────


def get_rate_limiter(
    repo: Annotated[RateLimitRepository, Depends(get_rate_limit_repo)],
) -> RateLimiter:
    return RateLimiter(repo)


def get_reset_token_service(
    repo: Annotated[ResetTokenRepository, Depends(get_reset_token_repo)],
) -> ResetTokenService:
    return ResetTokenService(repo)


def get_verification_service(
    codes: Annotated[VerificationCodeRepository, Depends(get_verification_code_repo)],
    users: Annotated[UserRepository, Depends(get_user_repo)],
    email_provider: Annotated[EmailProvider, Depends(get_email_provider)],
    templates: Annotated[EmailTemplates, Depends(get_email_templates)],
    reset_tokens: Annotated[ResetTokenService, Depends(get_reset_token_service)],
) -> VerificationService:
    return VerificationService(codes, users, email_provider, templates, reset_tokens)


def get_password_reset_service(
    tokens: Annotated[ResetTokenService, Depends(get_reset_token_service)],
    users: Annotated[UserRepository, Depends(get_user_repo)],
    codes: Annotated[VerificationCodeRepository, Depends(get_verification_code_repo)],
) -> PasswordResetService:
    return PasswordResetService(tokens, users, codes)


def get_organizer_application_service(
    repo: Annotated[OrganizerApplicationRepository, Depends(get_organizer_application_repo)],
    email_provider: Annotated[EmailProvider, Depends(get_email_provider)],
    templates: Annotated[EmailTemplates, Depends(get_email_templates)],
) -> OrganizerApplicationService:
    return OrganizerApplicationService(repo, email_provider, templates)


def get_user_service(
    repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> UserService:
    return UserService(repo)


# ── Auth ─────────────────────────────────────────────────────────────────────


def get_current_user(
    settings: Annotated[AppSettings, Depends(get_settings)],
    authorization: Annotated[Optional[str], Header()] = None,
    access_token: Annotated[Optional[str], Cookie()] = None,
) -> SessionUser:
    """Resolve the session user from a bearer token or the access_token cookie.

    Raises:
        AuthenticationError: no token, or the token fails verification.
    """
    token = extract_bearer_token(authorization, access_token)
    if not token:
        raise AuthenticationError("Authentication required")
    try:
        claims = decode_access_token(settings.jwt, token)
    except jwt.InvalidTokenError as e:
        log.info("session_token_rejected", error_type=type(e).__name__)
        raise AuthenticationError("Invalid or expired session") from e

    user_id = claims.get("sub")
    email = claims.get("email")
    if not user_id or not email:
        raise AuthenticationError("Invalid or expired session")
    return SessionUser(
        user_id=str(user_id),
        email=str(email).strip().lower(),
        role=claims.get("role") or "user",
    )


CurrentUser = Annotated[SessionUser, Depends(get_current_user)]
