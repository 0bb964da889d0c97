"""Authentication schemas."""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from yatra.schemas.user import UserRead


class Token(BaseModel):
    """Response body for access tokens."""

    access_token: str
    token_type: str = "bearer"


class RegistrationRequest(BaseModel):
    """Self-service customer registration payload."""

    email: EmailStr
    password: str = Field(min_length=8)
    full_name: str = Field(min_length=1, max_length=240)
    phone: str | None = None


class RegistrationResponse(BaseModel):
    """Response after successful self-service registration."""

    token: Token
    user: UserRead
