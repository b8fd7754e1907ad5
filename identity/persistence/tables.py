"""SQLAlchemy table definitions for the identity service.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import Column, ForeignKey, Index, MetaData, String, Table, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String(26), primary_key=True),  # ULID
    Column("username", String(255), nullable=False),
    Column("name", String(255), nullable=False, server_default=""),
    Column("email", String(255), nullable=False, server_default=""),
    Column("status", String(20), nullable=False),
    Column("avatar", Text, nullable=True),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),  # Tombstone
)

# Usernames are unique among live users only
Index(
    "uq_users_username_live",
    users_table.c.username,
    unique=True,
    postgresql_where=text("deleted_at IS NULL"),
)

# ============================================================================
# SOCIAL ACCOUNTS TABLE
# ============================================================================
social_accounts_table = Table(
    "social_accounts",
    metadata,
    Column(
        "user_id",
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("provider", String(20), primary_key=True),
    Column("social_id", String(255), primary_key=True),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),  # Tombstone
)

Index(
    "idx_social_accounts_social_id_live",
    social_accounts_table.c.social_id,
    postgresql_where=text("deleted_at IS NULL"),
)
