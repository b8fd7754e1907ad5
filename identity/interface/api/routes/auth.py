"""Authentication routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Response
from pydantic import BaseModel

from identity.application.usecase.auth import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
    SignInRequest,
    SignInResponse,
    SignInUseCase,
)
from identity.config import Settings
from identity.domain.error import NotFoundError
from identity.interface.api.security import AUTH_COOKIE, extract_token
from identity.interface.error import AuthenticationError
from identity.util.jwt import JWTError

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return current user if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    user: GetCurrentUserResponse | None = None


def _set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    # Cross-site requests need samesite="none", which requires secure cookies
    is_production = settings.environment == "production"
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        path="/",
        max_age=settings.auth.jwt_timeout_minutes * 60,
    )


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    request: SignInRequest,
    response: Response,
    sign_in_use_case: FromDishka[SignInUseCase],
    settings: FromDishka[Settings],
) -> SignInResponse:
    """Sign in with a Google or LINE ID token.

    A user is created on first sign-in from the verified email and name
    claims. The session token is returned and also set as an HTTP-only cookie.

    Examples:
        POST /api/v1/auth/sign-in
        {
            "provider": "line",
            "credential": "<line id token>",
            "nonce": "n-0S6_WzA2Mj"
        }

        Response:
        {
            "token": "eyJ...",
            "user": {...},
            "is_new_user": true
        }
    """
    sign_in_response = await sign_in_use_case.execute(request)
    _set_auth_cookie(response, sign_in_response.token, settings)
    return sign_in_response


@router.post("/logout", response_model=LogoutResponse)
async def logout(response: Response) -> LogoutResponse:
    """Logout user by clearing authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE, path="/")
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_auth_status(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> AuthStatusResponse:
    """Get current user if authenticated, or return unauthenticated status.

    This endpoint is safe to call without authentication - it will return
    authenticated=false instead of raising an error.
    """
    try:
        token = extract_token(authorization, auth_token)
        user = await get_current_user_use_case.execute(
            GetCurrentUserRequest(token=token)
        )
    except (AuthenticationError, JWTError, NotFoundError):
        return AuthStatusResponse(authenticated=False)

    return AuthStatusResponse(authenticated=True, user=user)
