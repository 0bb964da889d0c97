"""Password hashing and bearer token helpers."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import jwt

from yatra.core.config import get_settings

TOKEN_ISSUER = "yatra"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except (ValueError, TypeError):  # malformed or non-bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(
    subject: str,
    *,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a short-lived token for ``subject`` carrying its role claim."""
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = {
        "sub": subject,
        "iss": TOKEN_ISSUER,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    if role is not None:
        claims["role"] = role
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry and issuer; raises ``JWTError`` on failure."""
    settings = get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        issuer=TOKEN_ISSUER,
    )
