"""Session token service."""

import logfire

from identity.config import AuthSettings
from identity.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Issues and checks the session tokens handed out at sign-in."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        self.auth_settings = auth_settings

    def create_token(
        self, user_id: str, username: str, audience: str | None = None
    ) -> str:
        """Issue a session token for a user.

        Args:
            user_id: User ID, the token subject
            username: Username, carried for clients
            audience: Token audience (defaults to the first configured one)
        """
        token = create_token(user_id, username, self.auth_settings, audience)
        logfire.info("Session token issued", user_id=user_id)
        return token

    def verify_token(self, token: str) -> TokenPayload:
        """Check a session token's signature, expiry, audience and issuer.

        Raises:
            JWTError: If token is invalid or expired
        """
        try:
            return verify_token(token, self.auth_settings)
        except JWTError as e:
            logfire.info("Session token rejected", reason=str(e))
            raise
