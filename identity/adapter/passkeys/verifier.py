"""Verification of tokens issued by the passkey provider."""

import asyncio
from typing import Any

import jwt
import logfire
from jwt import PyJWKClient

from identity.domain.error import VerificationError
from identity.domain.service.identity_service import IdentityVerifier
from identity.domain.value import SocialProvider, VerifiedIdentity


class PasskeysVerifier(IdentityVerifier):
    """Base class for passkey token verifiers.

    Provides type distinction for dependency injection.
    """

    pass


class RealPasskeysVerifier(PasskeysVerifier):
    """Verifies passkey tokens against the tenant's JWKS."""

    def __init__(self, jwks_url: str) -> None:
        self.jwks_client = PyJWKClient(jwks_url, cache_keys=True)

    async def verify(
        self, credential: str, audience: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        """Verify a token returned by a finalize call.

        Raises:
            VerificationError: If the token is invalid or expired
        """
        _ = nonce  # Unused by passkeys
        claims = await asyncio.to_thread(self._decode, credential, audience)
        return VerifiedIdentity(
            provider=SocialProvider.PASSKEYS, subject=claims["sub"], claims=claims
        )

    def _decode(self, credential: str, audience: str) -> dict[str, Any]:
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(credential)
            return jwt.decode(
                credential,
                signing_key.key,
                algorithms=["RS256", "ES256"],
                audience=audience,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise VerificationError("passkey token has expired")
        except (jwt.InvalidTokenError, jwt.PyJWKClientError) as e:
            logfire.warn("Passkey token rejected", error=str(e))
            raise VerificationError(f"invalid passkey token: {e}")


class MockPasskeysVerifier(PasskeysVerifier):
    """Mock verifier accepting any non-empty token as its own subject."""

    async def verify(
        self, credential: str, audience: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        if not credential or credential == "invalid":
            raise VerificationError("invalid passkey token")
        return VerifiedIdentity(
            provider=SocialProvider.PASSKEYS,
            subject=credential,
            claims={"sub": credential, "aud": audience},
        )
