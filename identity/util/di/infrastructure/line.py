"""LINE infrastructure providers."""

from dishka import Scope, provide

from identity.adapter.line import LineVerifier, RealLineVerifier
from identity.config import ProviderSettings
from identity.util.di.base import ProviderBase


class LineProvider(ProviderBase):
    """LINE component base."""

    __mock_component__ = "line"


class ProdLineProvider(LineProvider):
    """Production LINE provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_line_verifier(self, settings: ProviderSettings) -> LineVerifier:
        """Provide LINE ID token verifier."""
        return RealLineVerifier(verify_url=settings.line.verify_url)
