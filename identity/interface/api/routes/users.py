"""User routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Query, status
from pydantic import BaseModel

from identity.application.usecase.auth import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
)
from identity.application.usecase.user import (
    AddSocialAccountRequest,
    AddSocialAccountResponse,
    AddSocialAccountUseCase,
    DeleteUserRequest,
    DeleteUserUseCase,
    GetUserRequest,
    GetUserResponse,
    GetUserUseCase,
    RegisterRequest,
    RegisterResponse,
    RegisterUseCase,
    RemoveSocialAccountRequest,
    RemoveSocialAccountResponse,
    RemoveSocialAccountUseCase,
    VerifyOTPRequest,
    VerifyOTPResponse,
    VerifyOTPUseCase,
)
from identity.domain.service import JWTService
from identity.domain.value import SocialProvider
from identity.interface.api.security import authenticate, extract_token

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


class VerifyOTPAPIRequest(BaseModel):
    """API request for verifying a one-time password."""

    otp: str


class AddSocialAccountAPIRequest(BaseModel):
    """API request for binding a social account to the current user."""

    provider: SocialProvider
    credential: str
    nonce: str | None = None


@router.post(
    "", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    request: RegisterRequest,
    register_use_case: FromDishka[RegisterUseCase],
) -> RegisterResponse:
    """Register a new user.

    The user is created in the registered state and becomes active once the
    one-time password is verified.

    Example:
        POST /api/v1/users
        {
            "username": "alice",
            "name": "Alice",
            "email": "alice@example.com"
        }
    """
    return await register_use_case.execute(request)


@router.get("", response_model=GetUserResponse)
async def find_user(
    get_user_use_case: FromDishka[GetUserUseCase],
    username: str | None = Query(default=None),
    social_id: str | None = Query(default=None),
) -> GetUserResponse:
    """Look a user up by username or by bound social ID.

    Example:
        GET /api/v1/users?username=alice
    """
    return await get_user_use_case.execute(
        GetUserRequest(username=username, social_id=social_id)
    )


@router.get("/me", response_model=GetCurrentUserResponse)
async def get_me(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetCurrentUserResponse:
    """Get the user the session token belongs to."""
    token = extract_token(authorization, auth_token)
    return await get_current_user_use_case.execute(GetCurrentUserRequest(token=token))


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    delete_user_use_case: FromDishka[DeleteUserUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> None:
    """Delete the current user.

    The user is revoked and its social accounts are released.
    """
    payload = authenticate(jwt_service, authorization, auth_token)
    await delete_user_use_case.execute(DeleteUserRequest(user_id=payload.user_id))


@router.post(
    "/me/accounts",
    response_model=AddSocialAccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_social_account(
    request: AddSocialAccountAPIRequest,
    add_social_account_use_case: FromDishka[AddSocialAccountUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> AddSocialAccountResponse:
    """Bind a social account to the current user.

    The credential is verified with the provider first; the verified subject
    becomes the bound social ID.

    Example:
        POST /api/v1/users/me/accounts
        Authorization: Bearer ...

        {
            "provider": "google",
            "credential": "<google id token>"
        }
    """
    payload = authenticate(jwt_service, authorization, auth_token)
    return await add_social_account_use_case.execute(
        AddSocialAccountRequest(
            user_id=payload.user_id,
            provider=request.provider,
            credential=request.credential,
            nonce=request.nonce,
        )
    )


@router.delete(
    "/me/accounts/{provider}/{social_id}",
    response_model=RemoveSocialAccountResponse,
)
async def remove_social_account(
    provider: SocialProvider,
    social_id: str,
    remove_social_account_use_case: FromDishka[RemoveSocialAccountUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> RemoveSocialAccountResponse:
    """Unbind a social account from the current user."""
    payload = authenticate(jwt_service, authorization, auth_token)
    return await remove_social_account_use_case.execute(
        RemoveSocialAccountRequest(
            user_id=payload.user_id, provider=provider, social_id=social_id
        )
    )


@router.get("/{user_id}", response_model=GetUserResponse)
async def get_user(
    user_id: str,
    get_user_use_case: FromDishka[GetUserUseCase],
) -> GetUserResponse:
    """Get a user by ID."""
    return await get_user_use_case.execute(GetUserRequest(user_id=user_id))


@router.post("/{user_id}/verify", response_model=VerifyOTPResponse)
async def verify_otp(
    user_id: str,
    request: VerifyOTPAPIRequest,
    verify_otp_use_case: FromDishka[VerifyOTPUseCase],
) -> VerifyOTPResponse:
    """Verify a registered user's one-time password and activate the user."""
    return await verify_otp_use_case.execute(
        VerifyOTPRequest(user_id=user_id, otp=request.otp)
    )
