"""Verify OTP use case."""

import logfire
from pydantic import BaseModel, Field

from identity.application.usecase.common import UserInfo
from identity.domain.error import VerificationError
from identity.domain.service import EventDispatcher, UserService
from identity.domain.value import UserId


class VerifyOTPRequest(BaseModel):
    """Verify OTP request."""

    user_id: str
    otp: str = Field(min_length=1)


class VerifyOTPResponse(BaseModel):
    """Verify OTP response."""

    user: UserInfo


class VerifyOTPUseCase:
    """Use case for activating a user after one-time-password verification."""

    def __init__(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> None:
        self.user_service = user_service
        self.event_dispatcher = event_dispatcher

    async def execute(self, request: VerifyOTPRequest) -> VerifyOTPResponse:
        """Activate the user.

        Raises:
            UserNotFoundError: If the user does not exist
            VerificationError: If the OTP is rejected
            InvalidStateError: If the user is revoked
        """
        with logfire.span("verify_otp", user_id=request.user_id):
            user = await self.user_service.get_by_id(UserId(request.user_id))

            # TODO: check the OTP against the issued code once OTP delivery exists
            if not request.otp.strip():
                raise VerificationError("otp is empty")

            async with self.event_dispatcher.flushing(user):
                user.activate()

            logfire.info("User activated", user_id=user.id)
            return VerifyOTPResponse(user=UserInfo.from_user(user))
