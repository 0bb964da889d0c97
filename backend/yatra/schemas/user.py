"""User-related schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from yatra.models.user import UserRole, UserStatus


class UserBase(BaseModel):
    """Shared user fields."""

    email: EmailStr
    full_name: str = Field(min_length=1, max_length=240)
    phone: str | None = None


class UserCreate(UserBase):
    """Payload for creating a user."""

    password: str = Field(min_length=8)
    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE


class UserRead(UserBase):
    """Serialized user response."""

    id: uuid.UUID
    role: UserRole
    status: UserStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
