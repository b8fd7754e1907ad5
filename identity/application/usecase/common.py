"""Response models shared by user-facing use cases."""

from datetime import datetime

from pydantic import BaseModel

from identity.domain.model import User
from identity.domain.value import SocialProvider, UserStatus


class SocialAccountInfo(BaseModel):
    """Social account information for response."""

    provider: SocialProvider
    social_id: str
    created_at: datetime


class UserInfo(BaseModel):
    """User information for response."""

    user_id: str
    username: str
    name: str
    email: str
    status: UserStatus
    avatar: str | None
    accounts: list[SocialAccountInfo]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserInfo":
        return cls(
            user_id=user.id,
            username=user.username,
            name=user.name,
            email=user.email,
            status=user.status,
            avatar=user.avatar,
            accounts=[
                SocialAccountInfo(
                    provider=account.provider,
                    social_id=account.social_id,
                    created_at=account.created_at,
                )
                for account in user.accounts
            ],
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
