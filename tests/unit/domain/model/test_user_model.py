"""Unit tests for the User aggregate."""

import pytest

from identity.domain.error import (
    AccountExistsError,
    InvalidStateError,
    SocialAccountNotFoundError,
)
from identity.domain.event import (
    EventName,
    UserActivated,
    UserDeleted,
    UserRegistered,
    UserSocialAccountAdded,
    UserSocialAccountRemoved,
)
from identity.domain.model import User
from identity.domain.value import SocialId, SocialProvider, UserStatus, user_id_time

GOOGLE_ID = SocialId("100043685676652067799")


def make_user(username: str = "mirror") -> User:
    return User.create(username, "Lin", f"{username}@x.com")


class TestUserCreate:
    """Tests for User.create."""

    def test_create_is_pending_with_no_accounts_or_events(self):
        """A new user is pending, has no accounts and emits nothing."""
        # Act
        user = make_user()

        # Assert
        assert user.status == UserStatus.PENDING
        assert user.accounts == []
        assert user.pending_events == ()
        assert user.deleted_at is None

    def test_created_at_is_embedded_in_id(self):
        """Creation time comes from the ID's timestamp."""
        user = make_user()

        assert user.created_at == user_id_time(user.id)
        assert user.updated_at == user.created_at

    def test_ids_sort_in_creation_order(self):
        """Later users get lexicographically greater IDs."""
        first = make_user("first")
        second = make_user("second")

        assert len(first.id) == 26
        assert first.id != second.id
        assert first.created_at <= second.created_at

    def test_empty_username_is_rejected(self):
        """Username must not be empty."""
        with pytest.raises(ValueError):
            User.create("", "Lin", "mirror@x.com")


class TestUserLifecycle:
    """Tests for status transitions."""

    def test_register_moves_pending_to_registered(self):
        """Register emits a snapshot of the registered user."""
        user = make_user()

        user.register()

        assert user.status == UserStatus.REGISTERED
        (event,) = user.pending_events
        assert isinstance(event, UserRegistered)
        assert event.user.id == user.id
        assert event.user.status == UserStatus.REGISTERED
        assert event.user.username == "mirror"

    def test_register_twice_fails(self):
        """Only a pending user can register."""
        user = make_user()
        user.register()

        with pytest.raises(InvalidStateError):
            user.register()

        assert len(user.pending_events) == 1

    def test_activate_emits_status(self):
        """Activate emits the new status."""
        user = make_user()
        user.register()

        user.activate()

        assert user.status == UserStatus.ACTIVATED
        event = user.pending_events[-1]
        assert isinstance(event, UserActivated)
        assert event.status == UserStatus.ACTIVATED
        assert event.occurred_at == user.updated_at

    def test_delete_revokes_and_keeps_accounts(self):
        """Delete tombstones the user but retains its accounts."""
        user = make_user()
        user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)

        user.delete()

        assert user.status == UserStatus.REVOKED
        assert user.is_deleted
        assert user.deleted_at == user.updated_at
        assert len(user.accounts) == 1
        event = user.pending_events[-1]
        assert isinstance(event, UserDeleted)
        assert event.occurred_at == user.deleted_at

    def test_revoked_user_cannot_change(self):
        """Revoked is terminal."""
        user = make_user()
        user.delete()

        with pytest.raises(InvalidStateError):
            user.delete()
        with pytest.raises(InvalidStateError):
            user.activate()
        with pytest.raises(InvalidStateError):
            user.add_social_account(SocialProvider.LINE, SocialId("U123"))

    def test_each_transition_emits_exactly_one_event(self):
        """Register, activate and N account adds yield N+2 events in call order."""
        user = make_user()
        providers = [
            SocialProvider.GOOGLE,
            SocialProvider.LINE,
            SocialProvider.PASSKEYS,
        ]

        user.register()
        user.activate()
        for index, provider in enumerate(providers):
            user.add_social_account(provider, SocialId(f"subject-{index}"))

        names = [event.name for event in user.pending_events]
        assert names == [
            EventName.USER_REGISTERED,
            EventName.USER_ACTIVATED,
            EventName.USER_SOCIAL_ACCOUNT_ADDED,
            EventName.USER_SOCIAL_ACCOUNT_ADDED,
            EventName.USER_SOCIAL_ACCOUNT_ADDED,
        ]
        assert [e.account.provider for e in user.pending_events[2:]] == providers


class TestUserSocialAccounts:
    """Tests for binding and unbinding social accounts."""

    def test_mirror_scenario(self):
        """A Google account added to a new user is its only account."""
        user = User.create("mirror", "Lin", "mirror@x.com")

        user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)

        assert len(user.accounts) == 1
        assert user.accounts[0].provider == SocialProvider.GOOGLE
        assert user.accounts[0].social_id == GOOGLE_ID

    def test_add_sets_account_timestamps(self):
        """New accounts are created and updated now."""
        user = make_user()

        account = user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)

        assert account.created_at == account.updated_at == user.updated_at
        event = user.pending_events[-1]
        assert isinstance(event, UserSocialAccountAdded)
        assert event.account == account

    @pytest.mark.parametrize("provider", list(SocialProvider))
    def test_add_same_pair_twice_conflicts(self, provider):
        """The second add of a pair fails and leaves accounts unchanged."""
        user = make_user()
        user.add_social_account(provider, SocialId("subject"))

        with pytest.raises(AccountExistsError):
            user.add_social_account(provider, SocialId("subject"))

        assert len(user.accounts) == 1
        assert len(user.pending_events) == 1

    def test_same_social_id_on_different_providers_is_allowed(self):
        """Uniqueness is per (provider, social ID) pair."""
        user = make_user()

        user.add_social_account(SocialProvider.GOOGLE, SocialId("same"))
        user.add_social_account(SocialProvider.LINE, SocialId("same"))

        assert len(user.accounts) == 2

    def test_remove_unknown_pair_fails(self):
        """Removing an unbound pair is a not-found error."""
        user = make_user()
        user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)

        with pytest.raises(SocialAccountNotFoundError):
            user.remove_social_account(SocialProvider.LINE, GOOGLE_ID)

        assert len(user.accounts) == 1

    def test_remove_then_re_add(self):
        """A removed pair can be bound again, once."""
        user = make_user()
        user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)

        user.remove_social_account(SocialProvider.GOOGLE, GOOGLE_ID)
        user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)

        assert [a.social_id for a in user.accounts] == [GOOGLE_ID]
        removed = user.pending_events[1]
        assert isinstance(removed, UserSocialAccountRemoved)
        assert removed.account.social_id == GOOGLE_ID


class TestUserEventBuffer:
    """Tests for the pending event buffer."""

    def test_pull_events_drains(self):
        """Pulled events are gone from the buffer."""
        user = make_user()
        user.register()

        events = user.pull_events()

        assert len(events) == 1
        assert user.pull_events() == []

    def test_snapshot_round_trip_drops_events(self):
        """Rebuilding from a snapshot yields equal state without events."""
        user = make_user()
        user.register()
        user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)

        copy = User.from_snapshot(user.snapshot())

        assert copy.snapshot() == user.snapshot()
        assert copy.pending_events == ()
