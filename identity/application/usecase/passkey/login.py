"""Passkey login use cases."""

import logfire
from pydantic import BaseModel

from identity.application.usecase.common import UserInfo
from identity.domain.error import UserNotFoundError
from identity.domain.service import (
    CeremonyData,
    IdentityService,
    JWTService,
    PasskeyService,
    UserService,
)
from identity.domain.value import SocialId, SocialProvider


class InitializePasskeyLoginRequest(BaseModel):
    """Start a passkey login; omit the user for a discoverable login."""

    user_id: str | None = None


class InitializePasskeyLoginResponse(BaseModel):
    """Credential request options for the browser."""

    options: CeremonyData


class InitializePasskeyLoginUseCase:
    """Use case for starting a passkey login ceremony."""

    def __init__(self, passkey_service: PasskeyService) -> None:
        self.passkey_service = passkey_service

    async def execute(
        self, request: InitializePasskeyLoginRequest
    ) -> InitializePasskeyLoginResponse:
        options = await self.passkey_service.initialize_login(request.user_id)
        return InitializePasskeyLoginResponse(options=options)


class FinalizePasskeyLoginRequest(BaseModel):
    """Finish a passkey login with the browser's assertion."""

    credential: CeremonyData


class FinalizePasskeyLoginResponse(BaseModel):
    """Session token for the passkey owner."""

    token: str
    user: UserInfo


class FinalizePasskeyLoginUseCase:
    """Use case for finishing a passkey login and issuing a session token."""

    def __init__(
        self,
        passkey_service: PasskeyService,
        identity_service: IdentityService,
        jwt_service: JWTService,
        user_service: UserService,
    ) -> None:
        self.passkey_service = passkey_service
        self.identity_service = identity_service
        self.jwt_service = jwt_service
        self.user_service = user_service

    async def execute(
        self, request: FinalizePasskeyLoginRequest
    ) -> FinalizePasskeyLoginResponse:
        """Finalize the ceremony and sign in the passkey's owner.

        Raises:
            ProviderError: If the passkey provider rejects the assertion
            VerificationError: If the returned token is invalid
            UserNotFoundError: If no live user holds the passkey
        """
        with logfire.span("finalize_passkey_login"):
            token = await self.passkey_service.finalize_login(request.credential)
            identity = await self.identity_service.verify(
                SocialProvider.PASSKEYS, token
            )
            social_id = SocialId(identity.subject)

            user = await self.user_service.get_by_social_id(social_id)
            if user is None:
                raise UserNotFoundError(social_id)

            session_token = self.jwt_service.create_token(user.id, user.username)
            logfire.info("User signed in with passkey", user_id=user.id)
            return FinalizePasskeyLoginResponse(
                token=session_token, user=UserInfo.from_user(user)
            )
