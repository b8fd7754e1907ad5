"""Domain layer DI providers."""

from dishka import Scope, provide

from identity.config import AuthSettings, ProviderSettings
from identity.domain.repository import UserRepository
from identity.domain.service import (
    IdentityService,
    IdentityVerifier,
    JWTService,
    PasskeyClient,
    PasskeyService,
    UserService,
)
from identity.domain.value import SocialProvider
from identity.util.di.base import ProviderBase


def provider_audiences(settings: ProviderSettings) -> dict[SocialProvider, str]:
    """Expected token audience per provider; unconfigured providers are omitted."""
    audiences = {
        SocialProvider.GOOGLE: settings.google.client_id,
        SocialProvider.LINE: settings.line.channel_id,
        SocialProvider.PASSKEYS: settings.passkeys.audience,
    }
    return {provider: aud for provider, aud in audiences.items() if aud}


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request or consumed event gets fresh service instances with their
    own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_identity_service(
        self,
        verifiers: dict[SocialProvider, IdentityVerifier],
        provider_settings: ProviderSettings,
    ) -> IdentityService:
        """Provide multi-provider identity verification service.

        Args:
            verifiers: Dictionary mapping providers to their verifiers
            provider_settings: Provider configuration holding the audiences

        Returns:
            IdentityService configured with all available verifiers
        """
        return IdentityService(
            verifiers=verifiers, audiences=provider_audiences(provider_settings)
        )

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_passkey_service(self, passkey_client: PasskeyClient) -> PasskeyService:
        """Provide passkey ceremony domain service."""
        return PasskeyService(passkey_client=passkey_client)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)
