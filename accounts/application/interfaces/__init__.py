"""Application interfaces (ports): repository and connection protocols."""

from accounts.application.interfaces.repositories import (
    IConnectionProvider,
    IUserRepository,
)

__all__ = [
    "IConnectionProvider",
    "IUserRepository",
]
