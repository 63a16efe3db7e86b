"""Domain layer: failure taxonomy and enums.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from accounts.domain.enums import FailureKind
from accounts.domain.exceptions import (
    AccountsException,
    DatabaseConnectionException,
    InternalServiceException,
    InvalidIdentifierException,
    TransactionFailureException,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)

__all__ = [
    "AccountsException",
    "DatabaseConnectionException",
    "FailureKind",
    "InternalServiceException",
    "InvalidIdentifierException",
    "TransactionFailureException",
    "UserAlreadyExistsException",
    "UserNotFoundException",
    "ValidationException",
]
