"""User domain events.

Every event carries the user ID and the time it occurred, plus enough data to
replay the state change on another instance. Events travel as JSON payloads
on topics of the form ``users.<user_id>.<routing_key>``; the routing key is
the only type information a consumer receives, so decoding goes through the
fixed ``EVENT_TYPES`` table.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Union

from pydantic import Field, ValidationError

from identity.domain.error import InvalidEventError
from identity.domain.value import (
    SocialAccount,
    UserId,
    UserStatus,
)
from identity.domain.value.common import ValueObject

TOPIC_PREFIX = "users"


class EventName(str, Enum):
    """Names of the events a user aggregate can emit."""

    USER_REGISTERED = "user_registered"
    USER_ACTIVATED = "user_activated"
    USER_SOCIAL_ACCOUNT_ADDED = "user_social_account_added"
    USER_SOCIAL_ACCOUNT_REMOVED = "user_social_account_removed"
    USER_DELETED = "user_deleted"

    @property
    def routing_key(self) -> str:
        """Topic suffix for this event, e.g. ``social_account_added``."""
        return self.value.removeprefix("user_")

    @classmethod
    def from_routing_key(cls, routing_key: str) -> "EventName":
        """Recover the event name from a topic suffix.

        Raises:
            ValueError: If the suffix names no known event
        """
        return cls(f"user_{routing_key}")


class UserSnapshot(ValueObject):
    """Full persisted state of a user at a point in time."""

    id: UserId
    username: str
    name: str
    email: str
    status: UserStatus
    accounts: list[SocialAccount] = Field(default_factory=list)
    avatar: str | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class UserEvent(ValueObject):
    """Base class for user events."""

    name: ClassVar[EventName]

    user_id: UserId
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def topic(self) -> str:
        return f"{TOPIC_PREFIX}.{self.user_id}.{self.name.routing_key}"


class UserRegistered(UserEvent):
    """A pending user completed registration."""

    name: ClassVar[EventName] = EventName.USER_REGISTERED

    user: UserSnapshot


class UserActivated(UserEvent):
    """A user was activated after verification."""

    name: ClassVar[EventName] = EventName.USER_ACTIVATED

    status: UserStatus


class UserSocialAccountAdded(UserEvent):
    """A social account was bound to a user."""

    name: ClassVar[EventName] = EventName.USER_SOCIAL_ACCOUNT_ADDED

    account: SocialAccount


class UserSocialAccountRemoved(UserEvent):
    """A social account was unbound from a user."""

    name: ClassVar[EventName] = EventName.USER_SOCIAL_ACCOUNT_REMOVED

    account: SocialAccount


class UserDeleted(UserEvent):
    """A user was revoked and tombstoned."""

    name: ClassVar[EventName] = EventName.USER_DELETED


DomainEvent = Union[
    UserRegistered,
    UserActivated,
    UserSocialAccountAdded,
    UserSocialAccountRemoved,
    UserDeleted,
]

EVENT_TYPES: dict[EventName, type[UserEvent]] = {
    EventName.USER_REGISTERED: UserRegistered,
    EventName.USER_ACTIVATED: UserActivated,
    EventName.USER_SOCIAL_ACCOUNT_ADDED: UserSocialAccountAdded,
    EventName.USER_SOCIAL_ACCOUNT_REMOVED: UserSocialAccountRemoved,
    EventName.USER_DELETED: UserDeleted,
}


def encode_event(event: UserEvent) -> tuple[str, bytes]:
    """Serialize an event for publication.

    Returns:
        Tuple of (topic, JSON payload)
    """
    return event.topic, event.model_dump_json().encode("utf-8")


def decode_event(topic: str, payload: bytes | str) -> UserEvent:
    """Decode a published event from its topic and payload.

    Args:
        topic: Topic the message arrived on (``users.<user_id>.<routing_key>``)
        payload: JSON payload

    Returns:
        The concrete event instance

    Raises:
        InvalidEventError: If the topic is malformed, names an unknown event,
            or the payload does not match the event type
    """
    parts = topic.split(".")
    if len(parts) != 3 or parts[0] != TOPIC_PREFIX:
        raise InvalidEventError(f"invalid event topic: {topic}")

    _, user_id, routing_key = parts
    try:
        event_name = EventName.from_routing_key(routing_key)
    except ValueError:
        raise InvalidEventError(f"unknown event: {routing_key}")

    try:
        event = EVENT_TYPES[event_name].model_validate_json(payload)
    except ValidationError as e:
        raise InvalidEventError(f"malformed {event_name.value} payload: {e}") from e

    if event.user_id != user_id:
        raise InvalidEventError(
            f"topic user {user_id} does not match payload user {event.user_id}"
        )

    return event
