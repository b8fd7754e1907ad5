"""Domain model entities for the identity service."""

from identity.domain.model.common import AggregateRoot
from identity.domain.model.user import User

__all__ = ["AggregateRoot", "User"]
