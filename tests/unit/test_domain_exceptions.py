"""Tests for domain exceptions (error_code, message, details, kind)."""

import pytest

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


def test_accounts_exception_default_error_code() -> None:
    """Base AccountsException uses class name as error_code when not provided."""
    exc = AccountsException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "AccountsException"
    assert exc.details == {}
    assert exc.kind is FailureKind.INTERNAL


def test_to_dict() -> None:
    exc = AccountsException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception_joins_messages() -> None:
    exc = ValidationException(["field 'email' is required", "field 'username' is required"])
    assert exc.kind is FailureKind.INVALID_INPUT
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.message == (
        "validation failed: field 'email' is required; field 'username' is required"
    )
    assert exc.details == {"errors": exc.errors}


def test_invalid_identifier() -> None:
    exc = InvalidIdentifierException("abc")
    assert exc.kind is FailureKind.INVALID_INPUT
    assert exc.message == "invalid user ID format"


def test_user_not_found_details_are_optional() -> None:
    assert UserNotFoundException().details == {}
    exc = UserNotFoundException("email", "a@acme.io")
    assert exc.kind is FailureKind.NOT_FOUND
    assert exc.message == "user not found"
    assert exc.details == {"lookup": "email", "value": "a@acme.io"}


def test_user_already_exists_message() -> None:
    exc = UserAlreadyExistsException("username", "alice")
    assert exc.kind is FailureKind.ALREADY_EXISTS
    assert exc.message == "user with username alice already exists"
    assert exc.details == {"field": "username", "value": "alice"}


@pytest.mark.parametrize(
    "exc",
    [
        InternalServiceException(),
        DatabaseConnectionException("ping failed"),
        TransactionFailureException("delete", "commit", "42"),
    ],
)
def test_store_failures_are_internal(exc: AccountsException) -> None:
    assert exc.kind is FailureKind.INTERNAL


def test_transaction_failure_details() -> None:
    exc = TransactionFailureException("delete", "step")
    assert exc.message == "transaction failed during step of delete"
    assert exc.details == {"operation": "delete", "stage": "step"}


def test_failure_kind_values() -> None:
    assert FailureKind.values() == ["invalid_input", "not_found", "already_exists", "internal"]
