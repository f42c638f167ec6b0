"""
Request DTOs for user endpoints.

UserStatusRequest - POST /api/users/status
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from shared.validators import normalize_email


class UserStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _strip(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def _lower(cls, v: str) -> str:
        return normalize_email(v)
