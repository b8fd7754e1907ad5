"""Passkey ceremony routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header
from pydantic import BaseModel

from identity.application.usecase.passkey import (
    FinalizePasskeyLoginRequest,
    FinalizePasskeyLoginResponse,
    FinalizePasskeyLoginUseCase,
    FinalizePasskeyRegistrationRequest,
    FinalizePasskeyRegistrationResponse,
    FinalizePasskeyRegistrationUseCase,
    InitializePasskeyLoginRequest,
    InitializePasskeyLoginResponse,
    InitializePasskeyLoginUseCase,
    InitializePasskeyRegistrationRequest,
    InitializePasskeyRegistrationResponse,
    InitializePasskeyRegistrationUseCase,
)
from identity.domain.service import CeremonyData, JWTService
from identity.interface.api.security import authenticate

router = APIRouter(prefix="/passkeys", tags=["passkeys"], route_class=DishkaRoute)


class FinalizePasskeyAPIRequest(BaseModel):
    """Browser response to a passkey ceremony."""

    credential: CeremonyData


@router.post(
    "/registration/initialize", response_model=InitializePasskeyRegistrationResponse
)
async def initialize_registration(
    use_case: FromDishka[InitializePasskeyRegistrationUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> InitializePasskeyRegistrationResponse:
    """Start registering a passkey for the current user.

    Returns the credential creation options to pass to
    ``navigator.credentials.create()``.
    """
    payload = authenticate(jwt_service, authorization, auth_token)
    return await use_case.execute(
        InitializePasskeyRegistrationRequest(user_id=payload.user_id)
    )


@router.post(
    "/registration/finalize", response_model=FinalizePasskeyRegistrationResponse
)
async def finalize_registration(
    request: FinalizePasskeyAPIRequest,
    use_case: FromDishka[FinalizePasskeyRegistrationUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> FinalizePasskeyRegistrationResponse:
    """Finish registration and bind the passkey to the current user."""
    payload = authenticate(jwt_service, authorization, auth_token)
    return await use_case.execute(
        FinalizePasskeyRegistrationRequest(
            user_id=payload.user_id, credential=request.credential
        )
    )


@router.post("/login/initialize", response_model=InitializePasskeyLoginResponse)
async def initialize_login(
    request: InitializePasskeyLoginRequest,
    use_case: FromDishka[InitializePasskeyLoginUseCase],
) -> InitializePasskeyLoginResponse:
    """Start a passkey login.

    Without a user ID the options allow any discoverable credential.
    """
    return await use_case.execute(request)


@router.post("/login/finalize", response_model=FinalizePasskeyLoginResponse)
async def finalize_login(
    request: FinalizePasskeyLoginRequest,
    use_case: FromDishka[FinalizePasskeyLoginUseCase],
) -> FinalizePasskeyLoginResponse:
    """Finish a passkey login and issue a session token."""
    return await use_case.execute(request)
