"""LINE ID token verification.

LINE verifies its own ID tokens: the token is posted to LINE's verify
endpoint, which checks signature, expiry, audience and (optionally) nonce and
returns the token's claims.
"""

from typing import Any

import httpx
import logfire

from identity.adapter.error import ProviderError
from identity.domain.error import VerificationError
from identity.domain.service.identity_service import IdentityVerifier
from identity.domain.value import SocialProvider, VerifiedIdentity


class LineVerifier(IdentityVerifier):
    """Base class for LINE verifiers.

    Provides type distinction for dependency injection.
    """

    pass


class RealLineVerifier(LineVerifier):
    """Verifies LINE ID tokens through LINE's verify API."""

    def __init__(self, verify_url: str, timeout: float = 10.0) -> None:
        """Initialize LINE verifier.

        Args:
            verify_url: LINE's ID token verify endpoint
            timeout: Request timeout in seconds
        """
        self.verify_url = verify_url
        self.timeout = timeout

    async def verify(
        self, credential: str, audience: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        """Verify a LINE ID token.

        Args:
            credential: ID token from LINE Login
            audience: LINE channel ID the token must be issued for
            nonce: Nonce sent in the authorization request

        Returns:
            Verified identity with the token's claims

        Raises:
            VerificationError: If LINE rejects the token or the nonce differs
            ProviderError: If LINE cannot be reached
        """
        data = {"id_token": credential, "client_id": audience}
        if nonce:
            data["nonce"] = nonce

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.verify_url,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logfire.error("LINE verify HTTP error", error=str(e))
            raise ProviderError(f"HTTP error during LINE verification: {e}")

        if response.status_code != 200:
            logfire.warn(
                "LINE token rejected",
                status_code=response.status_code,
                error=response.text,
            )
            detail = self._error_detail(response)
            raise VerificationError(f"invalid LINE token: {detail}")

        claims: dict[str, Any] = response.json()

        # Replay protection: the token must carry the nonce we issued
        if nonce and claims.get("nonce") != nonce:
            logfire.warn("LINE nonce mismatch", subject=claims.get("sub"))
            raise VerificationError("nonce mismatch")

        return VerifiedIdentity(
            provider=SocialProvider.LINE, subject=claims["sub"], claims=claims
        )

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        return body.get("error_description") or body.get("error") or response.text


class MockLineVerifier(LineVerifier):
    """Mock LINE verifier for testing.

    Treats the credential as the subject and echoes the nonce. A credential
    of ``"invalid"`` is rejected.
    """

    async def verify(
        self, credential: str, audience: str, nonce: str | None = None
    ) -> VerifiedIdentity:
        if credential == "invalid":
            raise VerificationError("invalid LINE token")

        return VerifiedIdentity(
            provider=SocialProvider.LINE,
            subject=credential,
            claims={
                "sub": credential,
                "aud": audience,
                "nonce": nonce,
                "email": f"{credential}@line.me",
                "name": "Mock LINE User",
                "picture": "https://profile.line-scdn.net/mock",
            },
        )
