"""Repository interfaces for the identity domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from identity.domain.repository.user import UserRepository

__all__ = ["UserRepository"]
