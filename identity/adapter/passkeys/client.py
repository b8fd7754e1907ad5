"""Remote passkey provider client.

Talks to a Hanko-style passkey API. Each tenant lives under
``{base_url}/{tenant_id}`` and requests authenticate with an ``apiKey``
header. Registration and login are two round-trips each; the finalize calls
return a signed JWT whose subject is the user the passkey belongs to.
"""

from typing import Any

import httpx
import logfire

from identity.adapter.error import ProviderError
from identity.domain.service.passkey_service import CeremonyData, PasskeyClient


class PasskeysError(ProviderError):
    """Passkey provider rejected a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class PasskeysClient(PasskeyClient):
    """Base class for passkey clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealPasskeysClient(PasskeysClient):
    """HTTP client for the remote passkey API."""

    def __init__(self, tenant_url: str, api_key: str, timeout: float = 10.0) -> None:
        """Initialize passkey client.

        Args:
            tenant_url: ``{base_url}/{tenant_id}``
            api_key: Tenant API key
            timeout: Request timeout in seconds
        """
        self.tenant_url = tenant_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def initialize_registration(
        self, user_id: str, username: str
    ) -> CeremonyData:
        return await self._post(
            "/registration/initialize", {"user_id": user_id, "username": username}
        )

    async def finalize_registration(self, credential: CeremonyData) -> str:
        result = await self._post("/registration/finalize", credential)
        return self._token(result)

    async def initialize_login(self, user_id: str | None = None) -> CeremonyData:
        body = {"user_id": user_id} if user_id else {}
        return await self._post("/login/initialize", body)

    async def finalize_login(self, credential: CeremonyData) -> str:
        result = await self._post("/login/finalize", credential)
        return self._token(result)

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON body to the tenant API.

        Raises:
            PasskeysError: If the request fails or the API rejects it
        """
        url = f"{self.tenant_url}{path}"
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url,
                    json=body,
                    headers={
                        "Content-Type": "application/json",
                        "apiKey": self.api_key,
                    },
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logfire.error("Passkey API HTTP error", path=path, error=str(e))
            raise PasskeysError(f"HTTP error calling passkey API: {e}")

        if response.status_code != 200:
            detail = self._failure_detail(response)
            logfire.warn(
                "Passkey API request failed",
                path=path,
                status_code=response.status_code,
                error=detail,
            )
            raise PasskeysError(detail, status_code=response.status_code)

        return response.json()

    @staticmethod
    def _token(result: dict[str, Any]) -> str:
        token = result.get("token")
        if not token:
            raise PasskeysError("passkey API returned no token")
        return token

    @staticmethod
    def _failure_detail(response: httpx.Response) -> str:
        """Extract the message from a ``{title, details, status}`` failure."""
        try:
            body = response.json()
        except ValueError:
            return response.text
        title = body.get("title") or "passkey request failed"
        details = body.get("details")
        return f"{title}: {details}" if details else title


class MockPasskeysClient(PasskeysClient):
    """Mock passkey client for testing.

    Finalize calls return the ``id`` of the submitted credential as the
    token, which ``MockPasskeysVerifier`` accepts as the subject.
    """

    async def initialize_registration(
        self, user_id: str, username: str
    ) -> CeremonyData:
        return {
            "publicKey": {
                "challenge": "mock-challenge",
                "rp": {"id": "localhost", "name": "identity"},
                "user": {"id": user_id, "name": username, "displayName": username},
            }
        }

    async def finalize_registration(self, credential: CeremonyData) -> str:
        return self._token(credential)

    async def initialize_login(self, user_id: str | None = None) -> CeremonyData:
        return {"publicKey": {"challenge": "mock-challenge", "rpId": "localhost"}}

    async def finalize_login(self, credential: CeremonyData) -> str:
        return self._token(credential)

    @staticmethod
    def _token(credential: CeremonyData) -> str:
        token = credential.get("id")
        if not token:
            raise PasskeysError("credential has no id", status_code=400)
        return token
