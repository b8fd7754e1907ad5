"""User aggregate root.

The user owns its status and its set of social accounts. Every state
transition mutates the aggregate and records exactly one domain event per
change; persistence happens only when those events are replayed by the
projection handlers.
"""

from datetime import datetime, timezone

from pydantic import Field

from identity.domain.error import (
    AccountExistsError,
    InvalidStateError,
    SocialAccountNotFoundError,
)
from identity.domain.event import (
    UserActivated,
    UserDeleted,
    UserEvent,
    UserRegistered,
    UserSnapshot,
    UserSocialAccountAdded,
    UserSocialAccountRemoved,
)
from identity.domain.model.common import AggregateRoot
from identity.domain.value import (
    SocialAccount,
    SocialId,
    SocialProvider,
    UserId,
    UserStatus,
    new_user_id,
    user_id_time,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(AggregateRoot[UserEvent]):
    """User aggregate root - provider-agnostic.

    A user can bind several external identities (Google, LINE, passkeys).
    """

    id: UserId
    username: str = Field(min_length=1, max_length=255)
    name: str = ""
    email: str = ""
    status: UserStatus = UserStatus.PENDING
    accounts: list[SocialAccount] = Field(default_factory=list)
    avatar: str | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @classmethod
    def create(
        cls, username: str, name: str, email: str, avatar: str | None = None
    ) -> "User":
        """Create a pending user.

        The creation time is the timestamp embedded in the new ID. No event is
        recorded; registration is announced by ``register()``.
        """
        user_id = new_user_id()
        created_at = user_id_time(user_id)
        return cls(
            id=user_id,
            username=username,
            name=name,
            email=email,
            status=UserStatus.PENDING,
            accounts=[],
            avatar=avatar,
            created_at=created_at,
            updated_at=created_at,
        )

    @classmethod
    def from_snapshot(cls, snapshot: UserSnapshot) -> "User":
        """Rebuild a user from a persisted or published snapshot."""
        return cls.model_validate(snapshot.model_dump())

    def snapshot(self) -> UserSnapshot:
        """Capture the user's current state."""
        return UserSnapshot.model_validate(self.model_dump())

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def register(self) -> None:
        """Move a pending user to registered."""
        if self.status != UserStatus.PENDING:
            raise InvalidStateError("register", self.status.value)

        self.status = UserStatus.REGISTERED
        self.updated_at = _now()

        self.record_event(
            UserRegistered(
                user_id=self.id,
                user=self.snapshot(),
                occurred_at=self.updated_at,
            )
        )

    def activate(self) -> None:
        """Activate the user after verification."""
        self._ensure_mutable("activate")

        self.status = UserStatus.ACTIVATED
        self.updated_at = _now()

        self.record_event(
            UserActivated(
                user_id=self.id,
                status=self.status,
                occurred_at=self.updated_at,
            )
        )

    def delete(self) -> None:
        """Revoke the user.

        Accounts are kept on the aggregate for the tombstone.
        """
        if self.status == UserStatus.REVOKED:
            raise InvalidStateError("delete", self.status.value)

        now = _now()
        self.status = UserStatus.REVOKED
        self.updated_at = now
        self.deleted_at = now

        self.record_event(UserDeleted(user_id=self.id, occurred_at=now))

    def has_social_account(self, provider: SocialProvider, social_id: SocialId) -> bool:
        return any(a.matches(provider, social_id) for a in self.accounts)

    def add_social_account(
        self, provider: SocialProvider, social_id: SocialId
    ) -> SocialAccount:
        """Bind a social account.

        Raises:
            AccountExistsError: If the pair is already bound to this user
        """
        self._ensure_mutable("add a social account to")
        if self.has_social_account(provider, social_id):
            raise AccountExistsError(provider.value, social_id)

        now = _now()
        account = SocialAccount(
            social_id=social_id,
            provider=provider,
            created_at=now,
            updated_at=now,
        )
        self.accounts.append(account)
        self.updated_at = now

        self.record_event(
            UserSocialAccountAdded(user_id=self.id, account=account, occurred_at=now)
        )
        return account

    def remove_social_account(
        self, provider: SocialProvider, social_id: SocialId
    ) -> None:
        """Unbind every account matching the pair.

        Raises:
            SocialAccountNotFoundError: If no account matches
        """
        self._ensure_mutable("remove a social account from")

        now = _now()
        kept: list[SocialAccount] = []
        removed: list[SocialAccount] = []
        for account in self.accounts:
            (removed if account.matches(provider, social_id) else kept).append(account)

        if not removed:
            raise SocialAccountNotFoundError(provider.value, social_id)

        self.accounts = kept
        self.updated_at = now

        for account in removed:
            self.record_event(
                UserSocialAccountRemoved(
                    user_id=self.id, account=account, occurred_at=now
                )
            )

    def _ensure_mutable(self, operation: str) -> None:
        if self.status == UserStatus.REVOKED:
            raise InvalidStateError(operation, self.status.value)
