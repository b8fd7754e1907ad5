"""Identity verification domain service."""

from abc import ABC, abstractmethod

import logfire

from identity.domain.error import AudienceNotFoundError, ProviderNotSupportedError
from identity.domain.value import SocialProvider, VerifiedIdentity

from .base import Service


class IdentityVerifier(ABC):
    """Generic credential verifier interface for all providers."""

    @abstractmethod
    async def verify(
        self, credential: str, audience: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        """Verify a provider credential.

        Args:
            credential: Provider-issued token (ID token or passkey token)
            audience: Expected audience of the token
            nonce: Expected nonce, for providers with replay protection

        Returns:
            The verified subject and its claims

        Raises:
            VerificationError: If the credential is invalid or expired
        """
        pass


class IdentityService(Service):
    """Domain service for multi-provider credential verification.

    Coordinates verification across identity providers (Google, LINE,
    passkeys). Each provider has a verifier and a configured audience.
    """

    def __init__(
        self,
        verifiers: dict[SocialProvider, IdentityVerifier],
        audiences: dict[SocialProvider, str],
    ) -> None:
        """Initialize identity service.

        Args:
            verifiers: Map of provider to verifier implementation
            audiences: Map of provider to expected token audience
        """
        self.verifiers = verifiers
        self.audiences = audiences

    async def verify(
        self, provider: SocialProvider, credential: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        """Verify a credential issued by a provider.

        Args:
            provider: Identity provider that issued the credential
            credential: The credential to verify
            nonce: Expected nonce (LINE)

        Returns:
            Verified identity

        Raises:
            ProviderNotSupportedError: If no verifier is configured
            AudienceNotFoundError: If no audience is configured
            VerificationError: If verification fails
        """
        verifier = self.verifiers.get(provider)
        if not verifier:
            raise ProviderNotSupportedError(provider.value)

        audience = self.audiences.get(provider)
        if not audience:
            raise AudienceNotFoundError(provider.value)

        with logfire.span("identity_service.verify", provider=provider.value):
            identity = await verifier.verify(credential, audience, nonce)
            logfire.info(
                "Credential verified", provider=provider.value, subject=identity.subject
            )
            return identity
