"""Domain services."""

from .base import Service
from .event_dispatcher import EventDispatcher, EventPublisher
from .identity_service import IdentityService, IdentityVerifier
from .jwt_service import JWTService
from .passkey_service import CeremonyData, PasskeyClient, PasskeyService
from .user_service import UserService

__all__ = [
    "CeremonyData",
    "EventDispatcher",
    "EventPublisher",
    "IdentityService",
    "IdentityVerifier",
    "JWTService",
    "PasskeyClient",
    "PasskeyService",
    "Service",
    "UserService",
]
