"""In-memory user repository for testing."""

from identity.domain.error import UserExistsError, UserNotFoundError
from identity.domain.model import User
from identity.domain.repository import UserRepository
from identity.domain.value import SocialAccount, SocialId, SocialProvider, UserId


def _copy(user: User) -> User:
    """Detached copy without pending events."""
    return User.from_snapshot(user.snapshot())


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Soft-deleted users stay in ``_users`` but are dropped from the social-ID
    index. Returned users are copies, so callers mutating an aggregate never
    change stored state without calling ``store``.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self._social_index: dict[SocialId, UserId] = {}

    async def store(self, user: User) -> None:
        """Save or replace a user and reindex its accounts."""
        for other in self._users.values():
            if (
                other.id != user.id
                and not other.is_deleted
                and other.username == user.username
            ):
                raise UserExistsError(user.username)

        self._users[user.id] = _copy(user)
        self._reindex(user.id)

    async def delete(self, user: User) -> None:
        """Keep the tombstoned record; drop its social-ID lookups."""
        self._users[user.id] = _copy(user)
        self._unindex(user.id)

    async def find(
        self, user_id: UserId, include_deleted: bool = False, for_update: bool = False
    ) -> User:
        user = self._users.get(user_id)
        if user is None or (user.is_deleted and not include_deleted):
            raise UserNotFoundError(user_id)
        return _copy(user)

    async def find_by_username(self, username: str) -> User:
        for user in self._users.values():
            if user.username == username and not user.is_deleted:
                return _copy(user)
        raise UserNotFoundError(username)

    async def find_by_social_id(self, social_id: SocialId) -> User:
        user_id = self._social_index.get(social_id)
        if user_id is None:
            raise UserNotFoundError(social_id)
        return await self.find(user_id)

    async def list_all(self) -> list[User]:
        return [
            _copy(user)
            for user_id, user in sorted(self._users.items())
            if not user.is_deleted
        ]

    async def upsert_social_account(
        self, user_id: UserId, account: SocialAccount
    ) -> None:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        accounts = [
            a
            for a in user.accounts
            if not a.matches(account.provider, account.social_id)
        ]
        accounts.append(account)
        user.accounts = accounts
        if account.updated_at > user.updated_at:
            user.updated_at = account.updated_at
        self._reindex(user_id)

    async def delete_social_account(
        self, user_id: UserId, provider: SocialProvider, social_id: SocialId
    ) -> None:
        user = self._users.get(user_id)
        if user is None:
            return

        user.accounts = [a for a in user.accounts if not a.matches(provider, social_id)]
        self._reindex(user_id)

    async def close(self) -> None:
        pass

    async def truncate(self) -> None:
        self._users.clear()
        self._social_index.clear()

    def _unindex(self, user_id: UserId) -> None:
        for social_id in [s for s, u in self._social_index.items() if u == user_id]:
            del self._social_index[social_id]

    def _reindex(self, user_id: UserId) -> None:
        self._unindex(user_id)
        user = self._users[user_id]
        if user.is_deleted:
            return
        for account in user.accounts:
            self._social_index[account.social_id] = user_id
