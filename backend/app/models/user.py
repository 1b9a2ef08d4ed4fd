"""
User account models for local signup and login.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.base import CamelModel


class UserCreate(BaseModel):
    """Create a user account."""

    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field("", max_length=255)
    password_hash: str = Field(..., max_length=255)


class UserAccount(BaseModel):
    """User account stored in the user repository."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str = ""
    password_hash: str
    created_at: datetime


class SignupRequest(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserSummary(CamelModel):
    """Public view of a user account."""

    id: str
    email: str
    name: str = ""


class SignupResponse(CamelModel):
    message: str = "User created successfully"
    user: UserSummary


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserSummary
