"""ORM models. Importing this package registers every table on Base.metadata."""

from accounts.infrastructure.persistence.models.session import UserSession
from accounts.infrastructure.persistence.models.user import User

__all__ = ["User", "UserSession"]
