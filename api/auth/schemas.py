"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class SigninRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class MessageResponse(BaseModel):
    message: str


class AccountResponse(BaseModel):
    id: UUID
    name: str
    email: str
    role: str
    created_at: datetime


class SigninResponse(BaseModel):
    user: AccountResponse
    token: str


class LogoutResponse(BaseModel):
    message: str
    token: str | None = None
