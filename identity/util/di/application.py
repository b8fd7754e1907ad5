"""Application layer DI providers."""

from dishka import Scope, provide

from identity.application.handler import UserEventHandler
from identity.application.usecase.auth import GetCurrentUserUseCase, SignInUseCase
from identity.application.usecase.passkey import (
    FinalizePasskeyLoginUseCase,
    FinalizePasskeyRegistrationUseCase,
    InitializePasskeyLoginUseCase,
    InitializePasskeyRegistrationUseCase,
)
from identity.application.usecase.user import (
    AddSocialAccountUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    RegisterUseCase,
    RemoveSocialAccountUseCase,
    VerifyOTPUseCase,
)
from identity.domain.repository import UserRepository
from identity.domain.service import (
    EventDispatcher,
    IdentityService,
    JWTService,
    PasskeyService,
    UserService,
)
from identity.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_register_use_case(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(
            user_service=user_service, event_dispatcher=event_dispatcher
        )

    @provide(scope=Scope.REQUEST)
    def get_verify_otp_use_case(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> VerifyOTPUseCase:
        """Provide verify OTP use case."""
        return VerifyOTPUseCase(
            user_service=user_service, event_dispatcher=event_dispatcher
        )

    @provide(scope=Scope.REQUEST)
    def get_add_social_account_use_case(
        self,
        identity_service: IdentityService,
        user_service: UserService,
        event_dispatcher: EventDispatcher,
    ) -> AddSocialAccountUseCase:
        """Provide add social account use case."""
        return AddSocialAccountUseCase(
            identity_service=identity_service,
            user_service=user_service,
            event_dispatcher=event_dispatcher,
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_social_account_use_case(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> RemoveSocialAccountUseCase:
        """Provide remove social account use case."""
        return RemoveSocialAccountUseCase(
            user_service=user_service, event_dispatcher=event_dispatcher
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_user_use_case(
        self, user_service: UserService, event_dispatcher: EventDispatcher
    ) -> DeleteUserUseCase:
        """Provide delete user use case."""
        return DeleteUserUseCase(
            user_service=user_service, event_dispatcher=event_dispatcher
        )

    @provide(scope=Scope.REQUEST)
    def get_get_user_use_case(self, user_service: UserService) -> GetUserUseCase:
        """Provide get user use case."""
        return GetUserUseCase(user_service=user_service)

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_sign_in_use_case(
        self,
        identity_service: IdentityService,
        jwt_service: JWTService,
        user_service: UserService,
        event_dispatcher: EventDispatcher,
    ) -> SignInUseCase:
        """Provide sign-in use case."""
        return SignInUseCase(
            identity_service=identity_service,
            jwt_service=jwt_service,
            user_service=user_service,
            event_dispatcher=event_dispatcher,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_user_use_case(
        self, jwt_service: JWTService, user_service: UserService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(jwt_service=jwt_service, user_service=user_service)

    # Passkey use cases
    @provide(scope=Scope.REQUEST)
    def get_initialize_passkey_registration_use_case(
        self, passkey_service: PasskeyService, user_service: UserService
    ) -> InitializePasskeyRegistrationUseCase:
        """Provide initialize passkey registration use case."""
        return InitializePasskeyRegistrationUseCase(
            passkey_service=passkey_service, user_service=user_service
        )

    @provide(scope=Scope.REQUEST)
    def get_finalize_passkey_registration_use_case(
        self,
        passkey_service: PasskeyService,
        identity_service: IdentityService,
        user_service: UserService,
        event_dispatcher: EventDispatcher,
    ) -> FinalizePasskeyRegistrationUseCase:
        """Provide finalize passkey registration use case."""
        return FinalizePasskeyRegistrationUseCase(
            passkey_service=passkey_service,
            identity_service=identity_service,
            user_service=user_service,
            event_dispatcher=event_dispatcher,
        )

    @provide(scope=Scope.REQUEST)
    def get_initialize_passkey_login_use_case(
        self, passkey_service: PasskeyService
    ) -> InitializePasskeyLoginUseCase:
        """Provide initialize passkey login use case."""
        return InitializePasskeyLoginUseCase(passkey_service=passkey_service)

    @provide(scope=Scope.REQUEST)
    def get_finalize_passkey_login_use_case(
        self,
        passkey_service: PasskeyService,
        identity_service: IdentityService,
        jwt_service: JWTService,
        user_service: UserService,
    ) -> FinalizePasskeyLoginUseCase:
        """Provide finalize passkey login use case."""
        return FinalizePasskeyLoginUseCase(
            passkey_service=passkey_service,
            identity_service=identity_service,
            jwt_service=jwt_service,
            user_service=user_service,
        )

    # Event handlers
    @provide(scope=Scope.REQUEST)
    def get_user_event_handler(
        self, user_repository: UserRepository
    ) -> UserEventHandler:
        """Provide user event projection handler."""
        return UserEventHandler(user_repository=user_repository)
