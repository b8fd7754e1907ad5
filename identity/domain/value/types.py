"""Domain value objects for the identity service.

Value objects are immutable and defined by their values, not identity.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import Field

from identity.domain.value.common import ValueObject
from identity.domain.value.identifiers import SocialId


class UserStatus(str, Enum):
    """Lifecycle status of a user.

    Normal flow is pending -> registered -> activated. Revoked is terminal
    and reachable from any state by deletion.
    """

    PENDING = "pending"
    REGISTERED = "registered"
    ACTIVATED = "activated"
    LOCKED = "locked"
    REVOKED = "revoked"


class SocialProvider(str, Enum):
    """External identity sources a user can bind."""

    GOOGLE = "google"
    FACEBOOK = "facebook"
    LINE = "line"
    PASSKEYS = "passkeys"


class SocialAccount(ValueObject):
    """Binding between a user and an external provider's subject.

    A user may hold several accounts, but each (provider, social_id) pair
    appears at most once.
    """

    social_id: SocialId
    provider: SocialProvider
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def matches(self, provider: SocialProvider, social_id: SocialId) -> bool:
        """Check whether this account is the given provider/social ID pair."""
        return self.provider == provider and self.social_id == social_id


class VerifiedIdentity(ValueObject):
    """Result of verifying a credential with an identity provider.

    The subject is the provider's stable identifier for the user and becomes
    the SocialId of the bound account.
    """

    provider: SocialProvider
    subject: str
    claims: dict[str, Any] = Field(default_factory=dict)

    def claim(self, name: str) -> str | None:
        """Return a string claim, or None if absent or not a string."""
        value = self.claims.get(name)
        return value if isinstance(value, str) and value else None
