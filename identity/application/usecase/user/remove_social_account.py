"""Remove social account use case."""

import logfire
from pydantic import BaseModel

from identity.application.usecase.common import UserInfo
from identity.domain.service import EventDispatcher, UserService
from identity.domain.value import SocialId, SocialProvider, UserId


class RemoveSocialAccountRequest(BaseModel):
    """Remove social account request."""

    user_id: str
    provider: SocialProvider
    social_id: str


class RemoveSocialAccountResponse(BaseModel):
    """Remove social account response."""

    user: UserInfo


class RemoveSocialAccountUseCase:
    """Use case for unbinding a social account from a user."""

    def __init__(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> None:
        self.user_service = user_service
        self.event_dispatcher = event_dispatcher

    async def execute(
        self, request: RemoveSocialAccountRequest
    ) -> RemoveSocialAccountResponse:
        """Unbind the account.

        Raises:
            UserNotFoundError: If the user does not exist
            SocialAccountNotFoundError: If the user holds no such account
        """
        with logfire.span(
            "remove_social_account",
            user_id=request.user_id,
            provider=request.provider.value,
        ):
            user = await self.user_service.get_by_id(UserId(request.user_id))

            async with self.event_dispatcher.flushing(user):
                user.remove_social_account(
                    request.provider, SocialId(request.social_id)
                )

            logfire.info(
                "Social account removed",
                user_id=user.id,
                provider=request.provider.value,
            )
            return RemoveSocialAccountResponse(user=UserInfo.from_user(user))
