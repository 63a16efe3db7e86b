"""Annotated field types that carry the validation rules of request records.

Custom rules raise PydanticCustomError with their rule tag as the error
type (``required``, ``email``, ``password``) so the validator can phrase
the failure. Built-in constraints (min_length, pattern, ...) keep their
pydantic error types.
"""

import re
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BeforeValidator,
    EmailStr,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)
from pydantic_core import PydanticCustomError

ALPHA_PATTERN = r"^[a-zA-Z]+$"
ALPHANUM_PATTERN = r"^[a-zA-Z0-9]+$"
NUMERIC_PATTERN = r"^[-+]?[0-9]+(?:\.[0-9]+)?$"

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
STRONG_PASSWORD_MIN_LENGTH = 8

_HAS_SYMBOL = re.compile(r"[^a-zA-Z0-9]")
_HAS_UPPER = re.compile(r"[A-Z]")
_HAS_LOWER = re.compile(r"[a-z]")
_HAS_DIGIT = re.compile(r"[0-9]")


def is_strong_password(password: str) -> bool:
    """Return True iff password has >= 8 chars and a symbol, an upper, a lower and a digit."""
    if len(password) < STRONG_PASSWORD_MIN_LENGTH:
        return False
    return bool(
        _HAS_SYMBOL.search(password)
        and _HAS_UPPER.search(password)
        and _HAS_LOWER.search(password)
        and _HAS_DIGIT.search(password)
    )


def _is_zero(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value) == 0
    return False


def _require(value: Any) -> Any:
    if _is_zero(value):
        raise PydanticCustomError("required", "field is required")
    return value


def _omit_empty(value: Any) -> Any:
    return None if _is_zero(value) else value


def _email_rule(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Report any EmailStr failure (type or shape) under the ``email`` tag."""
    try:
        return handler(value)
    except ValidationError:
        raise PydanticCustomError("email", "value is not a valid email address") from None


def _strong_password(value: str) -> str:
    if not is_strong_password(value):
        raise PydanticCustomError("password", "password is not strong enough")
    return value


Required = BeforeValidator(_require)
OmitEmpty = BeforeValidator(_omit_empty)

Username = Annotated[
    str,
    Field(
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=ALPHANUM_PATTERN,
    ),
]

# Before and wrap validators run right to left, so Required/OmitEmpty go first.
RequiredEmail = Annotated[EmailStr, WrapValidator(_email_rule), Required]
OptionalEmail = Annotated[EmailStr | None, WrapValidator(_email_rule), OmitEmpty]
RequiredUsername = Annotated[Username, Required]
OptionalUsername = Annotated[Username | None, OmitEmpty]
StrongPassword = Annotated[str, AfterValidator(_strong_password), Required]
