"""Integration tests for PostgresUserRepository.

These tests need a migrated Postgres reachable at DATABASE__URL.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from identity.domain.error import UserExistsError, UserNotFoundError
from identity.domain.model import User
from identity.domain.repository import UserRepository
from identity.domain.value import SocialAccount, SocialId, SocialProvider, UserStatus
from tests.di import build_test_container
from tests.harness import create_env_fixture

pytestmark = pytest.mark.integration

integration_env = create_env_fixture(unmock={"persistence"}, project=False)

GOOGLE_ID = SocialId("100043685676652067799")
LINE_ID = SocialId("U4af4980629")


@pytest_asyncio.fixture
async def container():
    """App container over the real database, emptied before each test."""
    container = build_test_container(unmock={"persistence"})
    async with container() as request_container:
        repository = await request_container.get(UserRepository)
        await repository.truncate()
    yield container
    await container.close()


def mirror_user(username: str = "mirror") -> User:
    user = User.create(username, "Lin", f"{username}@x.com")
    user.register()
    user.activate()
    user.add_social_account(SocialProvider.GOOGLE, GOOGLE_ID)
    user.add_social_account(SocialProvider.LINE, LINE_ID)
    user.pull_events()
    return user


class TestPostgresUserRepository:
    """Round trips through the users and social_accounts tables."""

    @pytest.mark.asyncio
    async def test_store_and_find(self, integration_env):
        repository = await integration_env.get(UserRepository)
        await repository.truncate()
        user = mirror_user()

        await repository.store(user)

        by_id = await repository.find(user.id)
        assert by_id.username == "mirror"
        assert by_id.status == UserStatus.ACTIVATED
        assert [(a.provider, a.social_id) for a in by_id.accounts] == [
            (SocialProvider.GOOGLE, GOOGLE_ID),
            (SocialProvider.LINE, LINE_ID),
        ]
        assert (await repository.find_by_username("mirror")).id == user.id
        assert (await repository.find_by_social_id(LINE_ID)).id == user.id

    @pytest.mark.asyncio
    async def test_store_overwrites(self, integration_env):
        """Storing again replaces the row and its account set."""
        repository = await integration_env.get(UserRepository)
        await repository.truncate()
        user = mirror_user()
        await repository.store(user)

        user.remove_social_account(SocialProvider.LINE, LINE_ID)
        user.name = "Lin Mirror"
        await repository.store(user)

        stored = await repository.find(user.id)
        assert stored.name == "Lin Mirror"
        assert [a.provider for a in stored.accounts] == [SocialProvider.GOOGLE]
        with pytest.raises(UserNotFoundError):
            await repository.find_by_social_id(LINE_ID)

    @pytest.mark.asyncio
    async def test_delete_tombstones(self, integration_env):
        repository = await integration_env.get(UserRepository)
        await repository.truncate()
        user = mirror_user()
        await repository.store(user)

        user.delete()
        await repository.delete(user)

        with pytest.raises(UserNotFoundError):
            await repository.find(user.id)
        with pytest.raises(UserNotFoundError):
            await repository.find_by_social_id(GOOGLE_ID)

        tombstone = await repository.find(user.id, include_deleted=True)
        assert tombstone.status == UserStatus.REVOKED
        assert tombstone.deleted_at is not None
        assert len(tombstone.accounts) == 2

    @pytest.mark.asyncio
    async def test_username_reusable_after_delete(self, integration_env):
        repository = await integration_env.get(UserRepository)
        await repository.truncate()
        first = mirror_user()
        await repository.store(first)
        first.delete()
        await repository.delete(first)

        second = User.create("mirror", "Other", "other@x.com")
        second.register()
        await repository.store(second)

        assert (await repository.find_by_username("mirror")).id == second.id

    @pytest.mark.asyncio
    async def test_upsert_social_account_is_idempotent(self, integration_env):
        repository = await integration_env.get(UserRepository)
        await repository.truncate()
        user = User.create("mirror", "Lin", "mirror@x.com")
        user.register()
        await repository.store(user)
        now = datetime.now(timezone.utc)
        account = SocialAccount(
            social_id=GOOGLE_ID,
            provider=SocialProvider.GOOGLE,
            created_at=now,
            updated_at=now,
        )

        await repository.upsert_social_account(user.id, account)
        await repository.upsert_social_account(
            user.id, account.model_copy(update={"updated_at": now + timedelta(1)})
        )

        stored = await repository.find(user.id)
        assert len(stored.accounts) == 1

        await repository.delete_social_account(
            user.id, SocialProvider.GOOGLE, GOOGLE_ID
        )
        await repository.delete_social_account(
            user.id, SocialProvider.GOOGLE, GOOGLE_ID
        )
        assert (await repository.find(user.id)).accounts == []


class TestPostgresUserRepositoryTransactions:
    """Behavior across separate request scopes (one transaction each)."""

    @pytest.mark.asyncio
    async def test_live_username_is_unique(self, container):
        async with container() as request_container:
            repository = await request_container.get(UserRepository)
            await repository.store(mirror_user())

        other = User.create("mirror", "Other", "other@x.com")
        other.register()
        with pytest.raises(UserExistsError):
            async with container() as request_container:
                repository = await request_container.get(UserRepository)
                await repository.store(other)

    @pytest.mark.asyncio
    async def test_concurrent_account_upserts(self, container):
        """Accounts added concurrently for one user are all kept."""
        user = User.create("mirror", "Lin", "mirror@x.com")
        user.register()
        async with container() as request_container:
            repository = await request_container.get(UserRepository)
            await repository.store(user)

        async def add(provider: SocialProvider, social_id: SocialId) -> None:
            now = datetime.now(timezone.utc)
            account = SocialAccount(
                social_id=social_id, provider=provider, created_at=now, updated_at=now
            )
            async with container() as request_container:
                repository = await request_container.get(UserRepository)
                await repository.upsert_social_account(user.id, account)

        await asyncio.gather(
            add(SocialProvider.GOOGLE, GOOGLE_ID),
            add(SocialProvider.LINE, LINE_ID),
            add(SocialProvider.PASSKEYS, SocialId("pk-1")),
        )

        async with container() as request_container:
            repository = await request_container.get(UserRepository)
            stored = await repository.find(user.id)
        assert {a.provider for a in stored.accounts} == {
            SocialProvider.GOOGLE,
            SocialProvider.LINE,
            SocialProvider.PASSKEYS,
        }

    @pytest.mark.asyncio
    async def test_locked_find_serializes_store_and_upsert(self, container):
        """An account upserted while another scope holds the user is not lost."""
        user = User.create("mirror", "Lin", "mirror@x.com")
        user.register()
        async with container() as request_container:
            repository = await request_container.get(UserRepository)
            await repository.store(user)

        async def add_line_account() -> None:
            now = datetime.now(timezone.utc)
            account = SocialAccount(
                social_id=LINE_ID,
                provider=SocialProvider.LINE,
                created_at=now,
                updated_at=now,
            )
            async with container() as request_container:
                repository = await request_container.get(UserRepository)
                await repository.upsert_social_account(user.id, account)

        async with container() as request_container:
            repository = await request_container.get(UserRepository)
            loaded = await repository.find(user.id, for_update=True)

            upsert = asyncio.create_task(add_line_account())
            await asyncio.sleep(0.2)
            assert not upsert.done()

            loaded.status = UserStatus.ACTIVATED
            await repository.store(loaded)

        await upsert

        async with container() as request_container:
            repository = await request_container.get(UserRepository)
            stored = await repository.find(user.id)
        assert stored.status == UserStatus.ACTIVATED
        assert [a.provider for a in stored.accounts] == [SocialProvider.LINE]
