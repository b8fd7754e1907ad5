"""Passkey provider infrastructure providers."""

from dishka import Scope, provide

from identity.adapter.passkeys import (
    PasskeysVerifier,
    RealPasskeysClient,
    RealPasskeysVerifier,
)
from identity.config import ProviderSettings
from identity.domain.service import PasskeyClient
from identity.util.di.base import ProviderBase


class PasskeysProvider(ProviderBase):
    """Passkeys component base."""

    __mock_component__ = "passkeys"


class ProdPasskeysProvider(PasskeysProvider):
    """Production passkey provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_passkey_client(self, settings: ProviderSettings) -> PasskeyClient:
        """Provide remote passkey API client."""
        return RealPasskeysClient(
            tenant_url=settings.passkeys.tenant_url,
            api_key=settings.passkeys.api_key,
            timeout=settings.passkeys.timeout_seconds,
        )

    @provide(scope=Scope.APP)
    def get_passkeys_verifier(self, settings: ProviderSettings) -> PasskeysVerifier:
        """Provide verifier for tokens issued by the passkey provider."""
        return RealPasskeysVerifier(jwks_url=settings.passkeys.jwks_url)
