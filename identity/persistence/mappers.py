"""Mappers for converting between database rows and domain models."""

from typing import Any

from identity.domain.model import User
from identity.domain.value import (
    SocialAccount,
    SocialId,
    SocialProvider,
    UserId,
    UserStatus,
)


def row_to_social_account(row: dict[str, Any]) -> SocialAccount:
    """Convert database row to SocialAccount value object."""
    return SocialAccount(
        social_id=SocialId(row["social_id"]),
        provider=SocialProvider(row["provider"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def social_account_to_dict(user_id: UserId, account: SocialAccount) -> dict[str, Any]:
    """Convert SocialAccount to a database dict for the owning user."""
    return {
        "user_id": user_id,
        "provider": account.provider.value,
        "social_id": account.social_id,
        "created_at": account.created_at,
        "updated_at": account.updated_at,
        "deleted_at": None,
    }


def row_to_user(row: dict[str, Any], accounts: list[SocialAccount]) -> User:
    """Convert database row and its account rows to a User aggregate.

    Args:
        row: Users row as dict
        accounts: The user's social accounts

    Returns:
        User aggregate with no pending events
    """
    return User(
        id=UserId(row["id"]),
        username=row["username"],
        name=row["name"],
        email=row["email"],
        status=UserStatus(row["status"]),
        accounts=accounts,
        avatar=row.get("avatar"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def user_to_dict(user: User) -> dict[str, Any]:
    """Convert User aggregate to a users-table dict (accounts excluded)."""
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "status": user.status.value,
        "avatar": user.avatar,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
        "deleted_at": user.deleted_at,
    }
