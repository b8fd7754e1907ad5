"""Register user use case."""

import logfire
from pydantic import BaseModel, Field

from identity.application.usecase.common import UserInfo
from identity.domain.model import User
from identity.domain.service import EventDispatcher, UserService


class RegisterRequest(BaseModel):
    """Register request."""

    username: str = Field(min_length=1, max_length=255)
    name: str = ""
    email: str = ""
    avatar: str | None = None


class RegisterResponse(BaseModel):
    """Register response."""

    user: UserInfo


class RegisterUseCase:
    """Use case for registering a new user."""

    def __init__(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> None:
        """Initialize register use case.

        Args:
            user_service: User domain service
            event_dispatcher: Publishes the user's events
        """
        self.user_service = user_service
        self.event_dispatcher = event_dispatcher

    async def execute(self, request: RegisterRequest) -> RegisterResponse:
        """Register a pending user.

        The user is persisted when its ``user_registered`` event is projected.

        Raises:
            UserExistsError: If the username is taken
        """
        with logfire.span("register_user", username=request.username):
            await self.user_service.ensure_username_available(request.username)

            user = User.create(
                request.username, request.name, request.email, request.avatar
            )
            async with self.event_dispatcher.flushing(user):
                user.register()

            logfire.info("User registered", user_id=user.id, username=user.username)
            return RegisterResponse(user=UserInfo.from_user(user))
