"""Infrastructure providers."""

# Import bases
from .eventbus import EventBusProvider
from .google import GoogleProvider
from .identity import VerifierAggregatorProvider
from .line import LineProvider
from .passkeys import PasskeysProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .eventbus import ProdEventBusProvider  # noqa: F401
from .google import ProdGoogleProvider  # noqa: F401
from .line import ProdLineProvider  # noqa: F401
from .passkeys import ProdPasskeysProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "EventBusProvider",
    "GoogleProvider",
    "LineProvider",
    "PasskeysProvider",
    "PersistenceProvider",
    "ProdEventBusProvider",
    "ProdGoogleProvider",
    "ProdLineProvider",
    "ProdPasskeysProvider",
    "ProdPersistenceProvider",
    "VerifierAggregatorProvider",
]
