"""Add social account use case."""

import logfire
from pydantic import BaseModel

from identity.application.usecase.common import UserInfo
from identity.domain.service import EventDispatcher, IdentityService, UserService
from identity.domain.value import SocialId, SocialProvider, UserId


class AddSocialAccountRequest(BaseModel):
    """Add social account request."""

    user_id: str
    provider: SocialProvider
    credential: str
    nonce: str | None = None


class AddSocialAccountResponse(BaseModel):
    """Add social account response."""

    user: UserInfo


class AddSocialAccountUseCase:
    """Use case for binding a verified provider identity to an existing user."""

    def __init__(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        event_dispatcher: EventDispatcher,
    ) -> None:
        """Initialize add social account use case.

        Args:
            identity_service: Verifies provider credentials
            user_service: User domain service
            event_dispatcher: Publishes the user's events
        """
        self.identity_service = identity_service
        self.user_service = user_service
        self.event_dispatcher = event_dispatcher

    async def execute(
        self, request: AddSocialAccountRequest
    ) -> AddSocialAccountResponse:
        """Verify the credential and bind its subject to the user.

        Raises:
            UserNotFoundError: If the user does not exist
            AccountExistsError: If the social ID is bound to any user
            VerificationError: If the credential is rejected
        """
        with logfire.span(
            "add_social_account",
            user_id=request.user_id,
            provider=request.provider.value,
        ):
            user = await self.user_service.get_by_id(UserId(request.user_id))

            identity = await self.identity_service.verify(
                request.provider, request.credential, request.nonce
            )
            social_id = SocialId(identity.subject)
            await self.user_service.ensure_social_id_available(
                request.provider, social_id
            )

            async with self.event_dispatcher.flushing(user):
                user.add_social_account(request.provider, social_id)

            logfire.info(
                "Social account added",
                user_id=user.id,
                provider=request.provider.value,
            )
            return AddSocialAccountResponse(user=UserInfo.from_user(user))
