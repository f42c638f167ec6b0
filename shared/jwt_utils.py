"""
Session JWT helpers.

Sessions are issued by the account service; this API only needs to verify
them. RS256 is used when a key pair is configured, otherwise HS256 with
JWT_SECRET. ``encode_access_token`` exists for the account service and tests.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Optional

import jwt

from config import JWTSettings
from shared.datetime_utils import utcnow


def _algorithm(settings: JWTSettings) -> str:
    return "RS256" if settings.use_rs256 else "HS256"


def _signing_key(settings: JWTSettings) -> str:
    if settings.use_rs256:
        # Support keys provided via env with literal \n sequences
        return settings.jwt_private_key.replace("\\n", "\n")
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set when RS256 keys are not provided")
    return settings.jwt_secret


def _verification_key(settings: JWTSettings) -> str:
    if settings.use_rs256:
        return settings.jwt_public_key.replace("\\n", "\n")
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set when RS256 keys are not provided")
    return settings.jwt_secret


def encode_access_token(
    settings: JWTSettings,
    user_id: str,
    email: str,
    role: str = "user",
    ttl_seconds: int = 900,
) -> str:
    now = utcnow()
    claims = {
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
    }
    return jwt.encode(claims, _signing_key(settings), algorithm=_algorithm(settings))


def decode_access_token(settings: JWTSettings, token: str) -> dict[str, Any]:
    """Verify signature, issuer, audience and expiry; return the claims.

    Raises:
        jwt.InvalidTokenError: for any invalid, expired or foreign token.
    """
    return jwt.decode(
        token,
        _verification_key(settings),
        algorithms=[_algorithm(settings)],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


def extract_bearer_token(
    authorization: Optional[str], cookie_token: Optional[str]
) -> Optional[str]:
    """Prefer an ``Authorization: Bearer`` header, fall back to the cookie."""
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
    return cookie_token or None
