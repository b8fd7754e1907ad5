"""Identity verifier aggregator provider."""

from dishka import Scope, provide

from identity.adapter.google import GoogleVerifier
from identity.adapter.line import LineVerifier
from identity.adapter.passkeys import PasskeysVerifier
from identity.domain.service import IdentityVerifier
from identity.domain.value import SocialProvider
from identity.util.di.base import ProviderBase


class VerifierAggregatorProvider(ProviderBase):
    """Provider that aggregates all identity verifiers into a dictionary."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_verifiers(
        self,
        google_verifier: GoogleVerifier,
        line_verifier: LineVerifier,
        passkeys_verifier: PasskeysVerifier,
    ) -> dict[SocialProvider, IdentityVerifier]:
        """Provide dictionary of all verifiers by provider.

        Facebook has no verifier, so signing in with it is rejected as an
        unsupported provider.
        """
        return {
            SocialProvider.GOOGLE: google_verifier,
            SocialProvider.LINE: line_verifier,
            SocialProvider.PASSKEYS: passkeys_verifier,
        }
