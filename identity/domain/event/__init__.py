"""Domain events emitted by the user aggregate."""

from identity.domain.event.user import (
    EVENT_TYPES,
    DomainEvent,
    EventName,
    UserActivated,
    UserDeleted,
    UserEvent,
    UserRegistered,
    UserSnapshot,
    UserSocialAccountAdded,
    UserSocialAccountRemoved,
    decode_event,
    encode_event,
)

__all__ = [
    "EVENT_TYPES",
    "DomainEvent",
    "EventName",
    "UserEvent",
    "UserSnapshot",
    "UserRegistered",
    "UserActivated",
    "UserSocialAccountAdded",
    "UserSocialAccountRemoved",
    "UserDeleted",
    "decode_event",
    "encode_event",
]
