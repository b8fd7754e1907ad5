"""PostgreSQL implementation of User repository."""

from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.error import UserExistsError, UserNotFoundError
from identity.domain.model import User
from identity.domain.repository import UserRepository
from identity.domain.value import SocialAccount, SocialId, SocialProvider, UserId
from identity.persistence.mappers import (
    row_to_social_account,
    row_to_user,
    social_account_to_dict,
    user_to_dict,
)
from identity.persistence.tables import social_accounts_table, users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository.

    Runs inside the session's transaction; the DI provider commits at the
    end of the request or message.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def store(self, user: User) -> None:
        """Upsert the user row and replace its live account rows.

        The user row is locked first so concurrent stores of one user
        serialize instead of interleaving account writes.
        """
        user_dict = user_to_dict(user)

        await self._lock_user(user.id)

        stmt = insert(users_table).values(**user_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[users_table.c.id],
            set_={k: v for k, v in user_dict.items() if k != "id"},
        )
        try:
            await self.session.execute(stmt)
        except IntegrityError as e:
            if "uq_users_username_live" in str(e.orig):
                raise UserExistsError(user.username) from e
            raise

        await self.session.execute(
            delete(social_accounts_table).where(
                social_accounts_table.c.user_id == user.id
            )
        )
        if user.accounts:
            await self.session.execute(
                insert(social_accounts_table),
                [social_account_to_dict(user.id, a) for a in user.accounts],
            )

        await self.session.flush()

    async def delete(self, user: User) -> None:
        """Tombstone the user row and its account rows."""
        deleted_at = user.deleted_at or datetime.now(timezone.utc)

        await self.session.execute(
            update(users_table)
            .where(users_table.c.id == user.id)
            .values(
                status=user.status.value,
                updated_at=user.updated_at,
                deleted_at=deleted_at,
            )
        )
        await self.session.execute(
            update(social_accounts_table)
            .where(social_accounts_table.c.user_id == user.id)
            .where(social_accounts_table.c.deleted_at.is_(None))
            .values(deleted_at=deleted_at)
        )
        await self.session.flush()

    async def find(
        self, user_id: UserId, include_deleted: bool = False, for_update: bool = False
    ) -> User:
        stmt = select(users_table).where(users_table.c.id == user_id)
        if not include_deleted:
            stmt = stmt.where(users_table.c.deleted_at.is_(None))
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise UserNotFoundError(user_id)

        # A tombstoned user keeps its (tombstoned) accounts
        accounts = await self._load_accounts(
            [user_id], include_deleted=row["deleted_at"] is not None
        )
        return row_to_user(dict(row), accounts[user_id])

    async def find_by_username(self, username: str) -> User:
        stmt = (
            select(users_table)
            .where(users_table.c.username == username)
            .where(users_table.c.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise UserNotFoundError(username)

        accounts = await self._load_accounts([row["id"]])
        return row_to_user(dict(row), accounts[row["id"]])

    async def find_by_social_id(self, social_id: SocialId) -> User:
        stmt = (
            select(users_table)
            .select_from(
                users_table.join(
                    social_accounts_table,
                    users_table.c.id == social_accounts_table.c.user_id,
                )
            )
            .where(social_accounts_table.c.social_id == social_id)
            .where(social_accounts_table.c.deleted_at.is_(None))
            .where(users_table.c.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise UserNotFoundError(social_id)

        accounts = await self._load_accounts([row["id"]])
        return row_to_user(dict(row), accounts[row["id"]])

    async def list_all(self) -> list[User]:
        stmt = (
            select(users_table)
            .where(users_table.c.deleted_at.is_(None))
            .order_by(users_table.c.id)
        )
        result = await self.session.execute(stmt)
        rows = [dict(row) for row in result.mappings().all()]

        accounts = await self._load_accounts([row["id"] for row in rows])
        return [row_to_user(row, accounts[row["id"]]) for row in rows]

    async def upsert_social_account(
        self, user_id: UserId, account: SocialAccount
    ) -> None:
        await self._lock_user(user_id)

        values = social_account_to_dict(user_id, account)
        stmt = insert(social_accounts_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                social_accounts_table.c.user_id,
                social_accounts_table.c.provider,
                social_accounts_table.c.social_id,
            ],
            set_={"updated_at": account.updated_at, "deleted_at": None},
        )
        await self.session.execute(stmt)
        await self.session.execute(
            update(users_table)
            .where(users_table.c.id == user_id)
            .where(users_table.c.updated_at < account.updated_at)
            .values(updated_at=account.updated_at)
        )
        await self.session.flush()

    async def delete_social_account(
        self, user_id: UserId, provider: SocialProvider, social_id: SocialId
    ) -> None:
        await self._lock_user(user_id)

        await self.session.execute(
            delete(social_accounts_table)
            .where(social_accounts_table.c.user_id == user_id)
            .where(social_accounts_table.c.provider == provider.value)
            .where(social_accounts_table.c.social_id == social_id)
        )
        await self.session.flush()

    async def close(self) -> None:
        """Sessions are closed by the DI provider."""
        pass

    async def truncate(self) -> None:
        await self.session.execute(delete(social_accounts_table))
        await self.session.execute(delete(users_table))
        await self.session.flush()

    async def _lock_user(self, user_id: UserId) -> None:
        """Lock the user row until the transaction ends; no-op if absent."""
        await self.session.execute(
            select(users_table.c.id)
            .where(users_table.c.id == user_id)
            .with_for_update()
        )

    async def _load_accounts(
        self, user_ids: list[str], include_deleted: bool = False
    ) -> dict[str, list[SocialAccount]]:
        """Load accounts for several users in one query, oldest first."""
        accounts: dict[str, list[SocialAccount]] = defaultdict(list)
        if not user_ids:
            return accounts

        stmt = (
            select(social_accounts_table)
            .where(social_accounts_table.c.user_id.in_(user_ids))
            .order_by(social_accounts_table.c.created_at)
        )
        if not include_deleted:
            stmt = stmt.where(social_accounts_table.c.deleted_at.is_(None))

        result = await self.session.execute(stmt)
        for row in result.mappings().all():
            accounts[row["user_id"]].append(row_to_social_account(dict(row)))
        return accounts
