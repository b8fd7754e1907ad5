"""Get user use case."""

from pydantic import BaseModel, model_validator

from identity.application.usecase.common import UserInfo
from identity.domain.error import UserNotFoundError
from identity.domain.service import UserService
from identity.domain.value import SocialId, UserId


class GetUserRequest(BaseModel):
    """Get user request; exactly one lookup key must be set."""

    user_id: str | None = None
    username: str | None = None
    social_id: str | None = None

    @model_validator(mode="after")
    def check_single_key(self) -> "GetUserRequest":
        keys = [self.user_id, self.username, self.social_id]
        if sum(key is not None for key in keys) != 1:
            raise ValueError("exactly one of user_id, username, social_id is required")
        return self


class GetUserResponse(BaseModel):
    """Get user response."""

    user: UserInfo


class GetUserUseCase:
    """Use case for looking up a live user."""

    def __init__(self, user_service: UserService) -> None:
        self.user_service = user_service

    async def execute(self, request: GetUserRequest) -> GetUserResponse:
        """Look the user up by ID, username or social ID.

        Raises:
            UserNotFoundError: If no live user matches
        """
        if request.user_id is not None:
            user = await self.user_service.get_by_id(UserId(request.user_id))
        elif request.username is not None:
            user = await self.user_service.get_by_username(request.username)
        else:
            social_id = SocialId(request.social_id or "")
            found = await self.user_service.get_by_social_id(social_id)
            if found is None:
                raise UserNotFoundError(social_id)
            user = found

        return GetUserResponse(user=UserInfo.from_user(user))
