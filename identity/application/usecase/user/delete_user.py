"""Delete user use case."""

import logfire
from pydantic import BaseModel

from identity.domain.service import EventDispatcher, UserService
from identity.domain.value import UserId


class DeleteUserRequest(BaseModel):
    """Delete user request."""

    user_id: str


class DeleteUserUseCase:
    """Use case for revoking a user."""

    def __init__(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> None:
        self.user_service = user_service
        self.event_dispatcher = event_dispatcher

    async def execute(self, request: DeleteUserRequest) -> None:
        """Revoke the user; the tombstone is written when the event is projected.

        Raises:
            UserNotFoundError: If the user does not exist or is already deleted
        """
        with logfire.span("delete_user", user_id=request.user_id):
            user = await self.user_service.get_by_id(UserId(request.user_id))

            async with self.event_dispatcher.flushing(user):
                user.delete()

            logfire.info("User deleted", user_id=user.id)
