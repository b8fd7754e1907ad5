"""PostgreSQL repository implementations."""

from identity.persistence.repository.user import PostgresUserRepository

__all__ = ["PostgresUserRepository"]
