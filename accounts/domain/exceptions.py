"""Domain exceptions for the account service.

Defines the failure taxonomy shared by the handler, the repository and the
transport. These exceptions are independent of infrastructure concerns;
the presentation layer maps their FailureKind to status codes in the
exception handlers.
"""

from typing import Any

from accounts.domain.enums import FailureKind


class AccountsException(Exception):
    """Base exception for all account service errors.

    All custom exceptions inherit from this class so the transport can map
    them uniformly. Store-derived failures never put store text in
    ``message``; it goes to the logs instead.

    Attributes:
        message: Human-readable error description (safe to show callers).
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
        kind: Transport-facing failure category.
    """

    kind: FailureKind = FailureKind.INTERNAL

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AccountsException):
    """Raised when a request record fails one or more field rules.

    Wraps the ordered list of human-readable failure strings produced by the
    validation engine; the list is surfaced to the caller verbatim.
    """

    kind = FailureKind.INVALID_INPUT

    def __init__(self, errors: list[str]) -> None:
        """Initialize with the rule failure messages.

        Args:
            errors: Human-readable messages, in the order the engine reported them.
        """
        self.errors = list(errors)
        super().__init__(
            f"validation failed: {'; '.join(self.errors)}",
            "VALIDATION_ERROR",
            {"errors": self.errors},
        )


class InvalidIdentifierException(AccountsException):
    """Raised when a user identifier is not a well-formed UUID."""

    kind = FailureKind.INVALID_INPUT

    def __init__(self, value: str) -> None:
        super().__init__(
            "invalid user ID format",
            "INVALID_IDENTIFIER",
            {"value": value},
        )


class UserNotFoundException(AccountsException):
    """Raised when no active user matches the lookup."""

    kind = FailureKind.NOT_FOUND

    def __init__(self, lookup: str | None = None, value: str | None = None) -> None:
        """Initialize with the lookup key that missed.

        Args:
            lookup: Optional key used for the lookup (e.g. 'id', 'email').
            value: Optional value that was looked up.
        """
        details: dict[str, Any] = {}
        if lookup:
            details["lookup"] = lookup
        if value is not None:
            details["value"] = value
        super().__init__("user not found", "NOT_FOUND", details)


class UserAlreadyExistsException(AccountsException):
    """Raised when creating a user whose email or username is taken by an active user."""

    kind = FailureKind.ALREADY_EXISTS

    def __init__(self, field: str, value: str) -> None:
        """Initialize with the colliding field.

        Args:
            field: 'email' or 'username'.
            value: The value that already exists.
        """
        super().__init__(
            f"user with {field} {value} already exists",
            "ALREADY_EXISTS",
            {"field": field, "value": value},
        )


class InternalServiceException(AccountsException):
    """Opaque failure surfaced to callers for any store or unexpected error.

    The triggering exception is chained as ``__cause__`` and logged; its text
    is never part of the message.
    """

    kind = FailureKind.INTERNAL

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message, "INTERNAL_ERROR")


class DatabaseConnectionException(AccountsException):
    """Raised when the connection provider cannot reach the store."""

    kind = FailureKind.INTERNAL

    def __init__(self, reason: str = "database connection failed") -> None:
        super().__init__(
            "database connection failed",
            "CONNECTION_FAILURE",
            {"reason": reason},
        )


class TransactionFailureException(AccountsException):
    """Raised when begin, a step, or commit fails inside a repository transaction.

    The failing driver/store exception is chained as ``__cause__``.
    """

    kind = FailureKind.INTERNAL

    def __init__(self, operation: str, stage: str, resource_id: str | None = None) -> None:
        """Initialize with where the transaction failed.

        Args:
            operation: Repository operation (e.g. 'delete').
            stage: 'begin', 'step' or 'commit'.
            resource_id: Optional id of the row the transaction targeted.
        """
        details: dict[str, Any] = {"operation": operation, "stage": stage}
        if resource_id is not None:
            details["resource_id"] = resource_id
        super().__init__(
            f"transaction failed during {stage} of {operation}",
            "TRANSACTION_FAILURE",
            details,
        )
