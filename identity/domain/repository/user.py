"""User repository interface."""

from abc import ABC, abstractmethod

from identity.domain.model.user import User
from identity.domain.value import SocialAccount, SocialId, SocialProvider, UserId


class UserRepository(ABC):
    """Repository for the User aggregate.

    Defines the contract for user persistence operations. Lookups raise
    ``UserNotFoundError`` instead of returning None, and never return
    soft-deleted users unless asked to. Implementations live in the
    infrastructure layer.
    """

    @abstractmethod
    async def store(self, user: User) -> None:
        """Upsert a user and replace its social accounts.

        Runs as one atomic step so concurrent writers never observe a
        partially written account set.

        Args:
            user: The user to store

        Raises:
            UserExistsError: If another live user holds the username
        """
        pass

    @abstractmethod
    async def delete(self, user: User) -> None:
        """Soft delete a user.

        Stores the tombstoned user and removes its social-account lookups,
        so the user can no longer be found by social ID.

        Args:
            user: The revoked user, with ``deleted_at`` set
        """
        pass

    @abstractmethod
    async def find(
        self, user_id: UserId, include_deleted: bool = False, for_update: bool = False
    ) -> User:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier
            include_deleted: Also return soft-deleted users
            for_update: Lock the user until the surrounding transaction ends,
                so a load-modify-store sequence cannot interleave with other
                writers of the same user

        Returns:
            The user

        Raises:
            UserNotFoundError: If no matching user exists
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: str) -> User:
        """Find a live user by username.

        Raises:
            UserNotFoundError: If no live user has the username
        """
        pass

    @abstractmethod
    async def find_by_social_id(self, social_id: SocialId) -> User:
        """Find the live user bound to a social ID.

        Raises:
            UserNotFoundError: If no live user holds the social ID
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[User]:
        """List all live users ordered by ID."""
        pass

    @abstractmethod
    async def upsert_social_account(
        self, user_id: UserId, account: SocialAccount
    ) -> None:
        """Insert or update one account keyed by (user, provider, social ID).

        Applying the same account twice leaves exactly one entry. The user
        is locked first, like ``find(..., for_update=True)``.

        Args:
            user_id: Owner of the account
            account: The account to write
        """
        pass

    @abstractmethod
    async def delete_social_account(
        self, user_id: UserId, provider: SocialProvider, social_id: SocialId
    ) -> None:
        """Remove one account keyed by (user, provider, social ID).

        Removing an absent account is not an error. The user is locked first.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by the repository."""
        pass

    @abstractmethod
    async def truncate(self) -> None:
        """Remove every user and account. Test use only."""
        pass
