"""Sign-in use case."""

import logfire
from pydantic import BaseModel

from identity.application.usecase.common import UserInfo
from identity.domain.error import ClaimMissingError, ProviderNotSupportedError
from identity.domain.model import User
from identity.domain.service import (
    EventDispatcher,
    IdentityService,
    JWTService,
    UserService,
)
from identity.domain.value import SocialId, SocialProvider, VerifiedIdentity

# Passkey sign-in goes through the passkey login ceremony instead
SIGN_IN_PROVIDERS = (SocialProvider.GOOGLE, SocialProvider.LINE)


class SignInRequest(BaseModel):
    """Sign-in request with a provider-issued credential."""

    provider: SocialProvider
    credential: str
    nonce: str | None = None  # LINE replay protection


class SignInResponse(BaseModel):
    """Sign-in response."""

    token: str
    user: UserInfo
    is_new_user: bool


class SignInUseCase:
    """Use case for signing in with an external identity provider."""

    def __init__(
        self,
        identity_service: IdentityService,
        jwt_service: JWTService,
        user_service: UserService,
        event_dispatcher: EventDispatcher,
    ) -> None:
        """Initialize sign-in use case.

        Args:
            identity_service: Verifies provider credentials
            jwt_service: Issues session tokens
            user_service: User domain service
            event_dispatcher: Publishes the user's events
        """
        self.identity_service = identity_service
        self.jwt_service = jwt_service
        self.user_service = user_service
        self.event_dispatcher = event_dispatcher

    async def execute(self, request: SignInRequest) -> SignInResponse:
        """Execute sign-in.

        Steps:
        1. Verify the credential with the provider
        2. Look up the user bound to the verified subject
        3. If none: create, register, activate and bind the account
        4. Refresh the avatar from the provider's picture claim
        5. Issue a session token

        Raises:
            ProviderNotSupportedError: If the provider cannot sign in
            VerificationError: If the credential is rejected
            ClaimMissingError: If a new user's email or name claim is absent, or
                the email has no local part to derive a username from
            UserExistsError: If a new user's derived username is taken
        """
        if request.provider not in SIGN_IN_PROVIDERS:
            raise ProviderNotSupportedError(request.provider.value)

        identity = await self.identity_service.verify(
            request.provider, request.credential, request.nonce
        )
        social_id = SocialId(identity.subject)

        user = await self.user_service.get_by_social_id(social_id)
        is_new_user = user is None

        with logfire.span(
            "sign_in", provider=request.provider.value, is_new_user=is_new_user
        ):
            if user is None:
                user = await self._create_user(identity, social_id)

            # The response carries the picture the provider has now
            picture = identity.claim("picture")
            if picture:
                user.avatar = picture

            token = self.jwt_service.create_token(user.id, user.username)

            logfire.info(
                "User signed in",
                user_id=user.id,
                provider=request.provider.value,
                is_new_user=is_new_user,
            )
            return SignInResponse(
                token=token, user=UserInfo.from_user(user), is_new_user=is_new_user
            )

    async def _create_user(
        self, identity: VerifiedIdentity, social_id: SocialId
    ) -> User:
        """Create an activated user from the provider's claims.

        The username is the local part of the email address.
        """
        email = identity.claim("email")
        if not email:
            raise ClaimMissingError("email")

        name = identity.claim("name")
        if not name:
            raise ClaimMissingError("name")

        username = email.split("@")[0]
        if not username:
            raise ClaimMissingError("email")
        await self.user_service.ensure_username_available(username)

        user = User.create(username, name, email, avatar=identity.claim("picture"))
        async with self.event_dispatcher.flushing(user):
            user.register()
            user.activate()
            user.add_social_account(identity.provider, social_id)

        logfire.info(
            "New user created",
            user_id=user.id,
            provider=identity.provider.value,
            username=username,
        )
        return user
