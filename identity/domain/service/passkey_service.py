"""Passkey ceremony domain service."""

from abc import ABC, abstractmethod
from typing import Any

import logfire

from .base import Service

CeremonyData = dict[str, Any]


class PasskeyClient(ABC):
    """Remote passkey (WebAuthn) provider interface.

    Ceremony data is opaque JSON passed between the browser and the provider.
    Finalize calls return a signed token whose subject identifies the
    credential owner.
    """

    @abstractmethod
    async def initialize_registration(
        self, user_id: str, username: str
    ) -> CeremonyData:
        """Start a registration ceremony and return the creation options."""
        pass

    @abstractmethod
    async def finalize_registration(self, credential: CeremonyData) -> str:
        """Finish a registration ceremony and return the provider token."""
        pass

    @abstractmethod
    async def initialize_login(self, user_id: str | None = None) -> CeremonyData:
        """Start a login ceremony and return the request options.

        Without a user ID the ceremony is discoverable (usernameless).
        """
        pass

    @abstractmethod
    async def finalize_login(self, credential: CeremonyData) -> str:
        """Finish a login ceremony and return the provider token."""
        pass


class PasskeyService(Service):
    """Domain service for passkey registration and login round-trips."""

    def __init__(self, passkey_client: PasskeyClient) -> None:
        """Initialize passkey service.

        Args:
            passkey_client: Remote passkey provider client
        """
        self.passkey_client = passkey_client

    @abstractmethod
    async def initialize_registration(
        self, user_id: str, username: str
    ) -> CeremonyData:
        with logfire.span("passkey_service.initialize_registration", user_id=user_id):
            return await self.passkey_client.initialize_registration(
                user_id, username
            )

    @abstractmethod
    async def finalize_registration(self, credential: CeremonyData) -> str:
        with logfire.span("passkey_service.finalize_registration"):
            return await self.passkey_client.finalize_registration(credential)

    @abstractmethod
    async def initialize_login(self, user_id: str | None = None) -> CeremonyData:
        with logfire.span("passkey_service.initialize_login", user_id=user_id):
            return await self.passkey_client.initialize_login(user_id)

    @abstractmethod
    async def finalize_login(self, credential: CeremonyData) -> str:
        with logfire.span("passkey_service.finalize_login"):
            return await self.passkey_client.finalize_login(credential)
