"""Strongly typed identifiers for identity domain entities.

User IDs are ULIDs: 48 bits of millisecond timestamp followed by 80 bits of
randomness, rendered as 26 Crockford base32 characters. They sort
lexicographically in creation order and carry their creation time.
"""

from datetime import datetime
from typing import NewType

from ulid import ULID

UserId = NewType("UserId", str)
SocialId = NewType("SocialId", str)


def new_user_id() -> UserId:
    """Mint a fresh, time-ordered user ID."""
    return UserId(str(ULID()))


def parse_user_id(value: str) -> UserId:
    """Validate and normalize a user ID string.

    Raises:
        ValueError: If the value is not a valid ULID
    """
    return UserId(str(ULID.from_str(value)))


def user_id_time(user_id: UserId) -> datetime:
    """Return the (UTC) creation time embedded in a user ID."""
    return ULID.from_str(user_id).datetime
