"""Google infrastructure providers."""

from dishka import Scope, provide

from identity.adapter.google import GoogleVerifier, RealGoogleVerifier
from identity.config import ProviderSettings
from identity.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_verifier(self, settings: ProviderSettings) -> GoogleVerifier:
        """Provide Google ID token verifier."""
        return RealGoogleVerifier(
            jwks_url=settings.google.jwks_url, issuers=settings.google.issuers
        )
