"""Authentication endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.api.deps import get_db_session
from yatra.api.rate_limits import DEFAULT_RATE_DEP, LOGIN_RATE_DEP, client_ip
from yatra.models.user import User
from yatra.schemas.auth import RegistrationRequest, RegistrationResponse, Token
from yatra.schemas.user import UserRead
from yatra.services import audit_service, auth_service
from yatra.services.auth_service import EmailAlreadyRegistered, create_access_token_for_user

router = APIRouter()


def _event_payload_for_user(user: User) -> dict[str, str]:
    return {"user_id": str(user.id), "email": user.email}


@router.post(
    "/token",
    response_model=Token,
    summary="Obtain access token",
    dependencies=[LOGIN_RATE_DEP],
)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> Token:
    """Validate credentials and issue a bearer token."""
    user = await auth_service.authenticate_user(
        session, email=form_data.username, password=form_data.password
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token_for_user(user)
    await audit_service.record_event(
        session,
        user_id=user.id,
        event_type="auth.login",
        description="Successful login",
        payload=_event_payload_for_user(user),
        ip_address=client_ip(request),
    )
    return Token(access_token=access_token)


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register customer",
    dependencies=[DEFAULT_RATE_DEP],
)
async def register_customer(
    payload: RegistrationRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> RegistrationResponse:
    try:
        user = await auth_service.register_customer(session, payload)
    except EmailAlreadyRegistered as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    await audit_service.record_event(
        session,
        user_id=user.id,
        event_type="auth.register.customer",
        description="Customer self-registration",
        payload=_event_payload_for_user(user),
        ip_address=client_ip(request),
    )
    return RegistrationResponse(
        token=Token(access_token=create_access_token_for_user(user)),
        user=UserRead.model_validate(user),
    )
