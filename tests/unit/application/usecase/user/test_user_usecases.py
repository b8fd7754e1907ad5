"""Unit tests for user use cases."""

import pytest
from dishka import AsyncContainer
from pydantic import ValidationError

from identity.adapter.eventbus import InMemoryEventPublisher
from identity.application.usecase.user import (
    AddSocialAccountRequest,
    AddSocialAccountUseCase,
    DeleteUserRequest,
    DeleteUserUseCase,
    GetUserRequest,
    GetUserUseCase,
    RegisterRequest,
    RegisterUseCase,
    RemoveSocialAccountRequest,
    RemoveSocialAccountUseCase,
    VerifyOTPRequest,
    VerifyOTPUseCase,
)
from identity.domain.error import (
    AccountExistsError,
    SocialAccountNotFoundError,
    UserExistsError,
    UserNotFoundError,
    VerificationError,
)
from identity.domain.repository import UserRepository
from identity.domain.value import SocialProvider, UserStatus
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def register(env: AsyncContainer, username: str = "mirror") -> str:
    use_case = await env.get(RegisterUseCase)
    response = await use_case.execute(
        RegisterRequest(username=username, name="Lin", email=f"{username}@x.com")
    )
    return response.user.user_id


class TestRegisterUseCase:
    """Tests for RegisterUseCase."""

    @pytest.mark.asyncio
    async def test_register_publishes_and_projects(self, unit_env: AsyncContainer):
        """Registration publishes one event; the projection stores the user."""
        # Arrange
        use_case = await unit_env.get(RegisterUseCase)
        publisher = await unit_env.get(InMemoryEventPublisher)
        repository = await unit_env.get(UserRepository)

        # Act
        response = await use_case.execute(
            RegisterRequest(username="mirror", name="Lin", email="mirror@x.com")
        )

        # Assert
        assert response.user.status == UserStatus.REGISTERED
        assert publisher.topics == [f"users.{response.user.user_id}.registered"]
        stored = await repository.find(response.user.user_id)
        assert stored.username == "mirror"
        assert stored.email == "mirror@x.com"

    @pytest.mark.asyncio
    async def test_register_taken_username_conflicts(self, unit_env: AsyncContainer):
        """A live user's username cannot be registered again."""
        await register(unit_env)
        use_case = await unit_env.get(RegisterUseCase)
        publisher = await unit_env.get(InMemoryEventPublisher)

        with pytest.raises(UserExistsError):
            await use_case.execute(RegisterRequest(username="mirror"))

        assert len(publisher.messages) == 1


class TestVerifyOTPUseCase:
    """Tests for VerifyOTPUseCase."""

    @pytest.mark.asyncio
    async def test_verify_activates(self, unit_env: AsyncContainer):
        """A verified user is activated."""
        user_id = await register(unit_env)
        use_case = await unit_env.get(VerifyOTPUseCase)

        response = await use_case.execute(
            VerifyOTPRequest(user_id=user_id, otp="123456")
        )

        assert response.user.status == UserStatus.ACTIVATED
        repository = await unit_env.get(UserRepository)
        assert (await repository.find(user_id)).status == UserStatus.ACTIVATED

    @pytest.mark.asyncio
    async def test_blank_otp_is_rejected(self, unit_env: AsyncContainer):
        """Whitespace is not a one-time password."""
        user_id = await register(unit_env)
        use_case = await unit_env.get(VerifyOTPUseCase)

        with pytest.raises(VerificationError):
            await use_case.execute(VerifyOTPRequest(user_id=user_id, otp="   "))


class TestSocialAccountUseCases:
    """Tests for adding and removing social accounts."""

    @pytest.mark.asyncio
    async def test_add_binds_verified_subject(self, unit_env: AsyncContainer):
        """The verified subject becomes the social ID."""
        user_id = await register(unit_env)
        use_case = await unit_env.get(AddSocialAccountUseCase)

        response = await use_case.execute(
            AddSocialAccountRequest(
                user_id=user_id, provider=SocialProvider.GOOGLE, credential="g-123"
            )
        )

        assert [(a.provider, a.social_id) for a in response.user.accounts] == [
            (SocialProvider.GOOGLE, "g-123")
        ]
        repository = await unit_env.get(UserRepository)
        assert (await repository.find_by_social_id("g-123")).id == user_id

    @pytest.mark.asyncio
    async def test_add_social_id_bound_to_other_user_conflicts(
        self, unit_env: AsyncContainer
    ):
        """A social ID can only be bound to one user."""
        first = await register(unit_env, "first")
        second = await register(unit_env, "second")
        use_case = await unit_env.get(AddSocialAccountUseCase)
        request = AddSocialAccountRequest(
            user_id=first, provider=SocialProvider.LINE, credential="U1"
        )
        await use_case.execute(request)

        with pytest.raises(AccountExistsError):
            await use_case.execute(request.model_copy(update={"user_id": second}))

    @pytest.mark.asyncio
    async def test_add_with_invalid_credential_fails(self, unit_env: AsyncContainer):
        """Rejected credentials bind nothing."""
        user_id = await register(unit_env)
        use_case = await unit_env.get(AddSocialAccountUseCase)

        with pytest.raises(VerificationError):
            await use_case.execute(
                AddSocialAccountRequest(
                    user_id=user_id,
                    provider=SocialProvider.GOOGLE,
                    credential="invalid",
                )
            )

    @pytest.mark.asyncio
    async def test_remove_then_re_add(self, unit_env: AsyncContainer):
        """A removed account can be bound again."""
        user_id = await register(unit_env)
        add = await unit_env.get(AddSocialAccountUseCase)
        remove = await unit_env.get(RemoveSocialAccountUseCase)
        request = AddSocialAccountRequest(
            user_id=user_id, provider=SocialProvider.GOOGLE, credential="g-1"
        )
        await add.execute(request)

        removed = await remove.execute(
            RemoveSocialAccountRequest(
                user_id=user_id, provider=SocialProvider.GOOGLE, social_id="g-1"
            )
        )
        readded = await add.execute(request)

        assert removed.user.accounts == []
        assert len(readded.user.accounts) == 1

    @pytest.mark.asyncio
    async def test_remove_unbound_account_fails(self, unit_env: AsyncContainer):
        """Removing an account the user does not hold is not found."""
        user_id = await register(unit_env)
        use_case = await unit_env.get(RemoveSocialAccountUseCase)

        with pytest.raises(SocialAccountNotFoundError):
            await use_case.execute(
                RemoveSocialAccountRequest(
                    user_id=user_id, provider=SocialProvider.LINE, social_id="U1"
                )
            )


class TestDeleteUserUseCase:
    """Tests for DeleteUserUseCase."""

    @pytest.mark.asyncio
    async def test_delete_hides_user(self, unit_env: AsyncContainer):
        """A deleted user is found neither by ID nor by social ID."""
        user_id = await register(unit_env)
        add = await unit_env.get(AddSocialAccountUseCase)
        await add.execute(
            AddSocialAccountRequest(
                user_id=user_id, provider=SocialProvider.GOOGLE, credential="g-1"
            )
        )
        use_case = await unit_env.get(DeleteUserUseCase)
        get_user = await unit_env.get(GetUserUseCase)

        await use_case.execute(DeleteUserRequest(user_id=user_id))

        with pytest.raises(UserNotFoundError):
            await get_user.execute(GetUserRequest(user_id=user_id))
        with pytest.raises(UserNotFoundError):
            await get_user.execute(GetUserRequest(social_id="g-1"))

    @pytest.mark.asyncio
    async def test_deleted_username_can_be_registered_again(
        self, unit_env: AsyncContainer
    ):
        """Deletion frees the username."""
        user_id = await register(unit_env)
        use_case = await unit_env.get(DeleteUserUseCase)
        await use_case.execute(DeleteUserRequest(user_id=user_id))

        new_user_id = await register(unit_env)

        assert new_user_id != user_id


class TestGetUserUseCase:
    """Tests for GetUserUseCase."""

    @pytest.mark.asyncio
    async def test_get_by_each_key(self, unit_env: AsyncContainer):
        """Users are found by ID, username and social ID."""
        user_id = await register(unit_env)
        add = await unit_env.get(AddSocialAccountUseCase)
        await add.execute(
            AddSocialAccountRequest(
                user_id=user_id, provider=SocialProvider.LINE, credential="U1"
            )
        )
        use_case = await unit_env.get(GetUserUseCase)

        by_id = await use_case.execute(GetUserRequest(user_id=user_id))
        by_username = await use_case.execute(GetUserRequest(username="mirror"))
        by_social_id = await use_case.execute(GetUserRequest(social_id="U1"))

        assert by_id.user.user_id == by_username.user.user_id == user_id
        assert by_social_id.user.user_id == user_id

    def test_request_requires_exactly_one_key(self):
        """Requests with no key or several keys are invalid."""
        with pytest.raises(ValidationError):
            GetUserRequest()
        with pytest.raises(ValidationError):
            GetUserRequest(user_id="x", username="y")
