"""Google ID token verification.

Validates Google Sign-In ID tokens against Google's published signing keys.
"""

import asyncio
from typing import Any

import jwt
import logfire
from jwt import PyJWKClient

from identity.domain.error import VerificationError
from identity.domain.service.identity_service import IdentityVerifier
from identity.domain.value import SocialProvider, VerifiedIdentity


class GoogleVerifier(IdentityVerifier):
    """Base class for Google verifiers.

    Provides type distinction for dependency injection.
    """

    pass


class RealGoogleVerifier(GoogleVerifier):
    """Verifies Google ID tokens with PyJWT and Google's JWKS."""

    def __init__(self, jwks_url: str, issuers: list[str]) -> None:
        """Initialize Google verifier.

        Args:
            jwks_url: Google's JWKS endpoint
            issuers: Accepted ``iss`` values
        """
        self.issuers = issuers
        self.jwks_client = PyJWKClient(jwks_url, cache_keys=True)

    async def verify(
        self, credential: str, audience: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        """Verify a Google ID token.

        Args:
            credential: ID token from Google Sign-In
            audience: OAuth client ID the token must be issued for
            nonce: Unused by Google

        Returns:
            Verified identity with the token's claims

        Raises:
            VerificationError: If the token is invalid, expired, or issued
                for another audience or issuer
        """
        _ = nonce  # Unused by Google
        # Key fetching is blocking; keep it off the event loop
        claims = await asyncio.to_thread(self._decode, credential, audience)

        if claims.get("iss") not in self.issuers:
            logfire.warn("Google token issuer rejected", issuer=claims.get("iss"))
            raise VerificationError(f"invalid issuer: {claims.get('iss')}")

        return VerifiedIdentity(
            provider=SocialProvider.GOOGLE, subject=claims["sub"], claims=claims
        )

    def _decode(self, credential: str, audience: str) -> dict[str, Any]:
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(credential)
            return jwt.decode(
                credential,
                signing_key.key,
                algorithms=["RS256"],
                audience=audience,
                options={"require": ["exp", "iss", "sub", "aud"]},
            )
        except jwt.ExpiredSignatureError:
            raise VerificationError("Google token has expired")
        except (jwt.InvalidTokenError, jwt.PyJWKClientError) as e:
            logfire.warn("Google token rejected", error=str(e))
            raise VerificationError(f"invalid Google token: {e}")


class MockGoogleVerifier(GoogleVerifier):
    """Mock Google verifier for testing.

    Treats the credential as the subject and returns deterministic claims
    without network calls. A credential of ``"invalid"`` is rejected.
    """

    def __init__(self, claims: dict[str, Any] | None = None) -> None:
        self.claims = claims

    async def verify(
        self, credential: str, audience: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        if credential == "invalid":
            raise VerificationError("invalid Google token")

        claims = self.claims
        if claims is None:
            claims = {
                "sub": credential,
                "aud": audience,
                "email": f"{credential}@gmail.com",
                "name": "Mock Google User",
                "picture": "https://example.com/avatar.jpg",
            }
        return VerifiedIdentity(
            provider=SocialProvider.GOOGLE, subject=credential, claims=claims
        )
