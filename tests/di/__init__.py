"""Mock providers for testing."""

from .eventbus import MockEventBusProvider
from .google import MockGoogleProvider
from .line import MockLineProvider
from .passkeys import MockPasskeysProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockEventBusProvider",
    "MockGoogleProvider",
    "MockLineProvider",
    "MockPasskeysProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
