"""Session token extraction for authenticated routes."""

from identity.domain.service import JWTService
from identity.interface.error import AuthenticationError
from identity.util.jwt import TokenPayload

AUTH_COOKIE = "auth_token"


def extract_token(authorization: str | None, auth_token: str | None) -> str:
    """Pick the session token from the Authorization header or the cookie.

    A bearer header takes precedence over the cookie.

    Raises:
        AuthenticationError: If neither carries a token
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            return token.strip()
    if auth_token:
        return auth_token
    raise AuthenticationError("Not authenticated")


def authenticate(
    jwt_service: JWTService, authorization: str | None, auth_token: str | None
) -> TokenPayload:
    """Verify the request's session token.

    Raises:
        AuthenticationError: If no token is present
        JWTError: If the token is invalid or expired
    """
    return jwt_service.verify_token(extract_token(authorization, auth_token))
