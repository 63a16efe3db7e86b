"""Application services: request validation and the user request handler."""

from accounts.application.services.user_service import (
    UserService,
    clamp_page,
    parse_user_id,
)
from accounts.application.services.validation import (
    FieldError,
    RuleDefinitionError,
    Validator,
    error_message,
    field_errors,
    is_strong_password,
)

__all__ = [
    "FieldError",
    "RuleDefinitionError",
    "UserService",
    "Validator",
    "clamp_page",
    "error_message",
    "field_errors",
    "is_strong_password",
    "parse_user_id",
]
