"""Passkey registration use cases."""

import logfire
from pydantic import BaseModel

from identity.application.usecase.common import UserInfo
from identity.domain.service import (
    CeremonyData,
    EventDispatcher,
    IdentityService,
    PasskeyService,
    UserService,
)
from identity.domain.value import SocialId, SocialProvider, UserId


class InitializePasskeyRegistrationRequest(BaseModel):
    """Start passkey registration for a user."""

    user_id: str


class InitializePasskeyRegistrationResponse(BaseModel):
    """Credential creation options for the browser."""

    options: CeremonyData


class InitializePasskeyRegistrationUseCase:
    """Use case for starting a passkey registration ceremony."""

    def __init__(
        self, passkey_service: PasskeyService, user_service: UserService
    ) -> None:
        self.passkey_service = passkey_service
        self.user_service = user_service

    async def execute(
        self, request: InitializePasskeyRegistrationRequest
    ) -> InitializePasskeyRegistrationResponse:
        user = await self.user_service.get_by_id(UserId(request.user_id))
        options = await self.passkey_service.initialize_registration(
            user.id, user.username
        )
        return InitializePasskeyRegistrationResponse(options=options)


class FinalizePasskeyRegistrationRequest(BaseModel):
    """Finish passkey registration with the browser's attestation."""

    user_id: str
    credential: CeremonyData


class FinalizePasskeyRegistrationResponse(BaseModel):
    """The user with the passkey bound."""

    user: UserInfo


class FinalizePasskeyRegistrationUseCase:
    """Use case for finishing a passkey registration and binding the passkey."""

    def __init__(
        self,
        passkey_service: PasskeyService,
        identity_service: IdentityService,
        user_service: UserService,
        event_dispatcher: EventDispatcher,
    ) -> None:
        """Initialize finalize passkey registration use case.

        Args:
            passkey_service: Remote passkey ceremonies
            identity_service: Verifies the provider's token
            user_service: User domain service
            event_dispatcher: Publishes the user's events
        """
        self.passkey_service = passkey_service
        self.identity_service = identity_service
        self.user_service = user_service
        self.event_dispatcher = event_dispatcher

    async def execute(
        self, request: FinalizePasskeyRegistrationRequest
    ) -> FinalizePasskeyRegistrationResponse:
        """Finalize the ceremony and bind the token's subject to the user.

        A user registering a second passkey keeps a single passkeys account.

        Raises:
            UserNotFoundError: If the user does not exist
            ProviderError: If the passkey provider rejects the ceremony
            VerificationError: If the returned token is invalid
            AccountExistsError: If the subject is bound to another user
        """
        with logfire.span("finalize_passkey_registration", user_id=request.user_id):
            user = await self.user_service.get_by_id(UserId(request.user_id))

            token = await self.passkey_service.finalize_registration(request.credential)
            identity = await self.identity_service.verify(
                SocialProvider.PASSKEYS, token
            )
            social_id = SocialId(identity.subject)

            if user.has_social_account(SocialProvider.PASSKEYS, social_id):
                logfire.info("Passkey account already bound", user_id=user.id)
                return FinalizePasskeyRegistrationResponse(
                    user=UserInfo.from_user(user)
                )

            await self.user_service.ensure_social_id_available(
                SocialProvider.PASSKEYS, social_id
            )
            async with self.event_dispatcher.flushing(user):
                user.add_social_account(SocialProvider.PASSKEYS, social_id)

            logfire.info("Passkey registered", user_id=user.id)
            return FinalizePasskeyRegistrationResponse(user=UserInfo.from_user(user))
