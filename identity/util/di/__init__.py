"""Dependency injection for the API, the event consumer and tests.

Every provider is listed once in ``PROVIDERS``. A provider with subclasses
is a swappable component: ``get_provider`` picks its production or mock
implementation.
"""

from typing import Type

from identity.util.di.application import ProdApplicationProvider
from identity.util.di.base import Component, ProviderBase
from identity.util.di.core import ProdConfigProvider
from identity.util.di.domain import ProdDomainProvider
from identity.util.di.infrastructure import (
    EventBusProvider,
    GoogleProvider,
    LineProvider,
    PasskeysProvider,
    PersistenceProvider,
    ProdEventBusProvider,
    ProdGoogleProvider,
    ProdLineProvider,
    ProdPasskeysProvider,
    ProdPersistenceProvider,
    VerifierAggregatorProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    # Always real
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # External systems, swapped for fakes in tests
    EventBusProvider,
    GoogleProvider,
    LineProvider,
    PasskeysProvider,
    PersistenceProvider,
    # Maps each provider to its verifier, over the components above
    VerifierAggregatorProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Resolve the provider class to instantiate for a ``PROVIDERS`` entry.

    Args:
        base: Entry from ``PROVIDERS``
        use_mock: Pick the fake implementation of a swappable component

    Returns:
        ``base`` itself if it has no implementations, otherwise the
        implementation whose ``__is_mock__`` equals ``use_mock``

    Raises:
        ValueError: If the component lacks the requested implementation
    """
    subclasses = base.__subclasses__()

    if not subclasses:
        return base

    for implementation in subclasses:
        if implementation.__is_mock__ == use_mock:
            return implementation

    component = base.__mock_component__ or base.__name__
    raise ValueError(
        f"{component} has no {'mock' if use_mock else 'production'} provider"
    )


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "EventBusProvider",
    "GoogleProvider",
    "LineProvider",
    "PasskeysProvider",
    "PersistenceProvider",
    "VerifierAggregatorProvider",
    "ProdEventBusProvider",
    "ProdGoogleProvider",
    "ProdLineProvider",
    "ProdPasskeysProvider",
    "ProdPersistenceProvider",
]
