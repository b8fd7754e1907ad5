"""JWT token utilities."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from identity.config import AuthSettings


class TokenPayload(BaseModel):
    """Session token payload."""

    sub: str
    username: str
    aud: str | list[str]
    iss: str
    exp: datetime

    @property
    def user_id(self) -> str:
        return self.sub


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    user_id: str,
    username: str,
    settings: AuthSettings,
    audience: str | None = None,
) -> str:
    """Create a session token for the user.

    Args:
        user_id: User ID, stored as the subject
        username: Username
        settings: Authentication settings
        audience: Token audience (defaults to the first configured audience)

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(
        minutes=settings.jwt_timeout_minutes
    )

    payload = {
        "sub": user_id,
        "username": username,
        "aud": audience or settings.default_audience,
        "iss": settings.jwt_issuer,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Any configured audience is accepted.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audiences,
            issuer=settings.jwt_issuer,
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
