"""Field validation for request records.

Request records are pydantic models; their rules are ordinary pydantic
constraints plus the annotated types in accounts.application.dtos.fields.
Validator parses raw input into a record, and every failed field becomes one
human-readable sentence through a table keyed by rule tag.

Pydantic error types are translated into the tags the table knows
(``missing`` -> required, ``string_too_short`` -> min, ...). Custom rules
already use their tag as error type. Anything else keeps its pydantic type
as tag and gets the generic sentence.

Record types are checked when the Validator is built, so a broken
declaration fails at startup, never while serving a request.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    PydanticUndefinedAnnotation,
    PydanticUserError,
    ValidationError,
)
from pydantic_core import SchemaError

from accounts.application.dtos.fields import (
    ALPHA_PATTERN,
    ALPHANUM_PATTERN,
    NUMERIC_PATTERN,
    is_strong_password,
)
from accounts.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

__all__ = [
    "FieldError",
    "RuleDefinitionError",
    "Validator",
    "error_message",
    "field_errors",
    "is_strong_password",
]


class RuleDefinitionError(ValueError):
    """A request record is declared wrongly (programming error, fatal at startup)."""


@dataclass(frozen=True)
class FieldError:
    """One failed rule on one field."""

    field: str
    tag: str
    param: str
    message: str


# Messages


def _bound_message(word: str) -> Callable[[str, str, bool], str]:
    def message(field: str, param: str, numeric: bool) -> str:
        if numeric:
            return f"field '{field}' must be at {word} {param}"
        return f"field '{field}' must be at {word} {param} characters long"

    return message


_MESSAGES: dict[str, Callable[[str, str, bool], str]] = {
    "required": lambda field, _, __: f"field '{field}' is required",
    "email": lambda field, _, __: f"field '{field}' must be a valid email address",
    "min": _bound_message("least"),
    "max": _bound_message("most"),
    "password": lambda field, _, __: (
        f"field '{field}' must be at least 8 characters long and contain at least "
        "one uppercase letter, one lowercase letter, one number, and one special character"
    ),
    "alphanum": lambda field, _, __: f"field '{field}' must contain only alphanumeric characters",
    "alpha": lambda field, _, __: f"field '{field}' must contain only alphabetic characters",
    "numeric": lambda field, _, __: f"field '{field}' must be a valid number",
    "len": lambda field, param, _: f"field '{field}' must be exactly {param} characters long",
    "oneof": lambda field, param, _: f"field '{field}' must be one of [{param}]",
    "datetime": lambda field, _, __: (
        f"field '{field}' must be a valid datetime in YYYY-MM-DD format"
    ),
}


def error_message(field: str, tag: str, param: str = "", numeric: bool = False) -> str:
    """Return the user-facing sentence for a failed rule.

    min/max read "must be at least N" for numeric bounds and "must be at
    least N characters long" otherwise. Tags without an entry get a generic
    "failed validation for tag" sentence.
    """
    template = _MESSAGES.get(tag)
    if template is None:
        return f"field '{field}' failed validation for tag '{tag}'"
    return template(field, param, numeric)


# pydantic error type -> (tag, ctx key holding the rule parameter)
_ERROR_TAGS: dict[str, tuple[str, str | None]] = {
    "missing": ("required", None),
    "string_too_short": ("min", "min_length"),
    "too_short": ("min", "min_length"),
    "greater_than_equal": ("min", "ge"),
    "string_too_long": ("max", "max_length"),
    "too_long": ("max", "max_length"),
    "less_than_equal": ("max", "le"),
    "int_parsing": ("numeric", None),
    "float_parsing": ("numeric", None),
    "date_parsing": ("datetime", None),
    "date_from_datetime_parsing": ("datetime", None),
    "date_type": ("datetime", None),
    "uuid_parsing": ("uuid", None),
    "uuid_type": ("uuid", None),
    "literal_error": ("oneof", "expected"),
}

_PATTERN_TAGS = {
    ALPHA_PATTERN: "alpha",
    ALPHANUM_PATTERN: "alphanum",
    NUMERIC_PATTERN: "numeric",
}

_NUMERIC_BOUNDS = frozenset({"ge", "le"})
_QUOTED = re.compile(r"'([^']*)'")


def _field_name(loc: Sequence[Any]) -> str:
    for part in reversed(loc):
        if isinstance(part, str):
            return part.lower()
    return "request"


def _tag_and_param(error: Mapping[str, Any]) -> tuple[str, str, bool]:
    error_type = error["type"]
    ctx = error.get("ctx") or {}
    if error_type == "string_pattern_mismatch":
        return _PATTERN_TAGS.get(ctx.get("pattern"), "pattern"), "", False
    tag, ctx_key = _ERROR_TAGS.get(error_type, (error_type, None))
    if ctx_key is None or ctx_key not in ctx:
        return tag, "", False
    param = ctx[ctx_key]
    if ctx_key == "expected":
        # "'red', 'green' or 'blue'" -> "red green blue"
        return tag, " ".join(_QUOTED.findall(str(param))) or str(param), False
    return tag, str(param), ctx_key in _NUMERIC_BOUNDS


def field_errors(errors: Sequence[Mapping[str, Any]]) -> list[FieldError]:
    """Translate pydantic error dicts into FieldErrors, one per field, in reported order."""
    result: list[FieldError] = []
    seen: set[str] = set()
    for error in errors:
        field = _field_name(error.get("loc", ()))
        if field in seen:
            continue
        seen.add(field)
        tag, param, numeric = _tag_and_param(error)
        result.append(
            FieldError(
                field=field,
                tag=tag,
                param=param,
                message=error_message(field, tag, param, numeric),
            )
        )
    return result


def _check_record_type(record_type: Any) -> None:
    if not (isinstance(record_type, type) and issubclass(record_type, BaseModel)):
        raise RuleDefinitionError(
            f"cannot validate {record_type!r}: request records must be pydantic models"
        )
    try:
        record_type.model_rebuild(force=True, raise_errors=True)
    except (PydanticUserError, PydanticUndefinedAnnotation, SchemaError) as exc:
        raise RuleDefinitionError(
            f"request record {record_type.__name__} is malformed: {exc}"
        ) from exc


class Validator:
    """Parses input into request records and reports failures as sentences.

    The record types given at construction are built eagerly; a declaration
    pydantic cannot build raises RuleDefinitionError here.
    """

    def __init__(self, *record_types: type[BaseModel]) -> None:
        for record_type in record_types:
            _check_record_type(record_type)
        self.record_types = record_types

    def validate(self, record_type: type[BaseModel], data: Any) -> list[FieldError]:
        """Return the failures for data as record_type (empty when valid)."""
        if isinstance(data, record_type):
            return []
        try:
            record_type.model_validate(data)
        except ValidationError as exc:
            return field_errors(exc.errors())
        return []

    def parse(self, record_type: type[R], data: R | Mapping[str, Any]) -> R:
        """Return data as a record_type instance.

        Records that are already instances pass through; they were validated
        when built.

        Raises:
            ValidationException: With every field message, in reported order.
        """
        if isinstance(data, record_type):
            return data
        try:
            return record_type.model_validate(data)
        except ValidationError as exc:
            errors = field_errors(exc.errors())
        logger.warning(
            "Validation failed for %s: %s",
            record_type.__name__,
            ", ".join(f"{e.field}:{e.tag}" for e in errors),
        )
        raise ValidationException([e.message for e in errors])
