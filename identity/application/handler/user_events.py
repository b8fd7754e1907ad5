"""Projection handlers applying user events to the repository.

Delivery is at-least-once, so every handler is idempotent: replaying an
event leaves the repository in the same state as applying it once. Each
handler loads the user with its row locked, mutates in memory, then persists
in a single repository call, all in one transaction. Any exception means the
event was not applied.
"""

from collections.abc import Awaitable, Callable

import logfire

from identity.domain.error import InvalidEventError
from identity.domain.event import (
    EventName,
    UserActivated,
    UserDeleted,
    UserEvent,
    UserRegistered,
    UserSocialAccountAdded,
    UserSocialAccountRemoved,
)
from identity.domain.model import User
from identity.domain.repository import UserRepository
from identity.domain.value import UserStatus


class UserEventHandler:
    """Applies user events to the read-side repository."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize the handler.

        Args:
            user_repository: Repository receiving the projected state
        """
        self.user_repository = user_repository
        self._handlers: dict[EventName, Callable[[UserEvent], Awaitable[None]]] = {
            EventName.USER_REGISTERED: self.on_registered,
            EventName.USER_ACTIVATED: self.on_activated,
            EventName.USER_SOCIAL_ACCOUNT_ADDED: self.on_social_account_added,
            EventName.USER_SOCIAL_ACCOUNT_REMOVED: self.on_social_account_removed,
            EventName.USER_DELETED: self.on_deleted,
        }

    async def handle(self, event: UserEvent) -> None:
        """Dispatch an event to its handler.

        Raises:
            InvalidEventError: If the event type has no handler
            NotFoundError: If the event targets an unknown user
        """
        handler = self._handlers.get(event.name)
        if handler is None:
            raise InvalidEventError(f"no handler for event: {event.name}")

        with logfire.span(
            "user_event_handler.handle", event=event.name.value, user_id=event.user_id
        ):
            await handler(event)

    async def on_registered(self, event: UserRegistered) -> None:
        """Upsert the registered user's snapshot (full overwrite)."""
        await self.user_repository.store(User.from_snapshot(event.user))
        logfire.info("User projected", user_id=event.user_id)

    async def on_activated(self, event: UserActivated) -> None:
        """Copy the status and update time from the event."""
        user = await self.user_repository.find(event.user_id, for_update=True)
        user.status = event.status
        user.updated_at = event.occurred_at
        await self.user_repository.store(user)
        logfire.info(
            "User status projected", user_id=event.user_id, status=event.status.value
        )

    async def on_social_account_added(self, event: UserSocialAccountAdded) -> None:
        """Upsert the account keyed by (user, provider, social ID)."""
        # Fails with NotFound so the event is retried after registration lands
        await self.user_repository.find(event.user_id, for_update=True)
        await self.user_repository.upsert_social_account(event.user_id, event.account)
        logfire.info(
            "Social account projected",
            user_id=event.user_id,
            provider=event.account.provider.value,
        )

    async def on_social_account_removed(self, event: UserSocialAccountRemoved) -> None:
        """Remove the account; an already absent account is fine."""
        await self.user_repository.find(event.user_id, for_update=True)
        await self.user_repository.delete_social_account(
            event.user_id, event.account.provider, event.account.social_id
        )
        logfire.info(
            "Social account removal projected",
            user_id=event.user_id,
            provider=event.account.provider.value,
        )

    async def on_deleted(self, event: UserDeleted) -> None:
        """Tombstone the user at the event's time."""
        user = await self.user_repository.find(
            event.user_id, include_deleted=True, for_update=True
        )
        if user.is_deleted:
            logfire.info("User already deleted", user_id=event.user_id)
            return

        user.status = UserStatus.REVOKED
        user.updated_at = event.occurred_at
        user.deleted_at = event.occurred_at
        await self.user_repository.delete(user)
        logfire.info("User deletion projected", user_id=event.user_id)
