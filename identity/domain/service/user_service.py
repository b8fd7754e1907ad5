"""User domain service."""

import logfire

from identity.domain.error import AccountExistsError, UserExistsError, UserNotFoundError
from identity.domain.model import User
from identity.domain.repository import UserRepository
from identity.domain.value import SocialId, SocialProvider, UserId

from .base import Service


class UserService(Service):
    """Domain service for user lookups and uniqueness checks."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            UserNotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=user_id):
            try:
                user = await self.user_repository.find(user_id)
            except UserNotFoundError:
                logfire.warn("User not found", user_id=user_id)
                raise
            logfire.info("User found", user_id=user_id, username=user.username)
            return user

    async def get_by_username(self, username: str) -> User:
        """Get user by username.

        Raises:
            UserNotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_username", username=username):
            try:
                user = await self.user_repository.find_by_username(username)
            except UserNotFoundError:
                logfire.warn("User not found", username=username)
                raise
            logfire.info("User found", username=username, user_id=user.id)
            return user

    async def get_by_social_id(self, social_id: SocialId) -> User | None:
        """Get the user bound to a social ID.

        Returns:
            User if found, None otherwise
        """
        with logfire.span("user_service.get_by_social_id", social_id=social_id):
            try:
                user = await self.user_repository.find_by_social_id(social_id)
            except UserNotFoundError:
                logfire.info("No user bound to social ID", social_id=social_id)
                return None
            logfire.info("User found", social_id=social_id, user_id=user.id)
            return user

    async def ensure_username_available(self, username: str) -> None:
        """Check that no live user holds the username.

        Raises:
            UserExistsError: If the username is taken
        """
        try:
            await self.user_repository.find_by_username(username)
        except UserNotFoundError:
            return
        logfire.warn("Username taken", username=username)
        raise UserExistsError(username)

    async def ensure_social_id_available(
        self, provider: SocialProvider, social_id: SocialId
    ) -> None:
        """Check that no live user is bound to the social ID.

        Raises:
            AccountExistsError: If any user already holds the social ID
        """
        existing = await self.get_by_social_id(social_id)
        if existing:
            logfire.warn(
                "Social account already bound",
                provider=provider.value,
                social_id=social_id,
                user_id=existing.id,
            )
            raise AccountExistsError(provider.value, social_id)

    async def list_all(self) -> list[User]:
        with logfire.span("user_service.list_all"):
            users = await self.user_repository.list_all()
            logfire.info("Users listed", count=len(users))
            return users
