"""initial_schema

Create the identity schema:
- Users (ULID keys, soft delete via deleted_at)
- Social accounts (provider/social ID pairs bound to a user)

Revision ID: 3f1c2a9d7b40
Revises:
Create Date: 2026-10-19 09:12:44.518302

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(26), nullable=False),  # ULID
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("avatar", sa.Text(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    # Deleted users free their username
    op.create_index(
        "uq_users_username_live",
        "users",
        ["username"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    # ========================================================================
    # SOCIAL_ACCOUNTS table
    # ========================================================================
    op.create_table(
        "social_accounts",
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("provider", sa.String(20), nullable=False),  # 'google', 'line', ...
        sa.Column("social_id", sa.String(255), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "provider", "social_id"),
    )
    op.create_index(
        "idx_social_accounts_social_id_live",
        "social_accounts",
        ["social_id"],
        postgresql_where=sa.text("deleted_at IS NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_social_accounts_social_id_live", table_name="social_accounts")
    op.drop_table("social_accounts")
    op.drop_index("uq_users_username_live", table_name="users")
    op.drop_table("users")
