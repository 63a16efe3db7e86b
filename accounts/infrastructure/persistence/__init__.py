"""Persistence: connection provider, ORM models, repositories, migrations."""

from accounts.infrastructure.persistence.database import Base, ConnectionProvider

__all__ = ["Base", "ConnectionProvider"]
