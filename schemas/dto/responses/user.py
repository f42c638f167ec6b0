"""
Response DTOs for user endpoints.

UserStatusResponse - POST /api/users/status
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    is_active: bool = Field(alias="isActive")
