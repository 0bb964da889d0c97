"""Role checks shared by the admin routers."""

from __future__ import annotations

from fastapi import HTTPException, status

from yatra.models.user import User, UserRole


def has_role(user: User, *roles: UserRole) -> bool:
    return user.role in roles


def require_roles(user: User, *roles: UserRole) -> User:
    """Return ``user`` or raise 403 when it holds none of ``roles``."""
    if not has_role(user, *roles):
        allowed = ", ".join(role.value for role in roles)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Requires role: {allowed}",
        )
    return user


__all__ = ["has_role", "require_roles"]
