"""Domain value objects for the identity service."""

from identity.domain.value.identifiers import (
    SocialId,
    UserId,
    new_user_id,
    parse_user_id,
    user_id_time,
)
from identity.domain.value.types import (
    SocialAccount,
    SocialProvider,
    UserStatus,
    VerifiedIdentity,
)

__all__ = [
    # Identifiers
    "UserId",
    "SocialId",
    "new_user_id",
    "parse_user_id",
    "user_id_time",
    # Types
    "UserStatus",
    "SocialProvider",
    "SocialAccount",
    "VerifiedIdentity",
]
