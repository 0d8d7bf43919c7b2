"""
Schemas for account management endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UserUpdateRequest(BaseModel):
    """Sparse account update; omitted or blank fields are left untouched."""

    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=128)
