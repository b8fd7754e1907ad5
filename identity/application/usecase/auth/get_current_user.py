"""Get current user use case."""

from pydantic import BaseModel

from identity.application.usecase.common import UserInfo
from identity.domain.service import JWTService, UserService
from identity.domain.value import UserId


class GetCurrentUserRequest(BaseModel):
    """Session token to resolve."""

    token: str


class GetCurrentUserResponse(BaseModel):
    """The token's user."""

    user: UserInfo


class GetCurrentUserUseCase:
    """Use case for getting the user a session token belongs to."""

    def __init__(self, jwt_service: JWTService, user_service: UserService) -> None:
        self.jwt_service = jwt_service
        self.user_service = user_service

    async def execute(self, request: GetCurrentUserRequest) -> GetCurrentUserResponse:
        """Verify the token and load its user.

        Raises:
            JWTError: If token is invalid or expired
            UserNotFoundError: If the user no longer exists
        """
        payload = self.jwt_service.verify_token(request.token)
        user = await self.user_service.get_by_id(UserId(payload.sub))
        return GetCurrentUserResponse(user=UserInfo.from_user(user))
