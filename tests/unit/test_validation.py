"""Tests for request validation (rule types, message table, record checks)."""

from datetime import date
from typing import Annotated, Literal

import pytest
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from accounts.application.dtos.fields import ALPHA_PATTERN, NUMERIC_PATTERN, is_strong_password
from accounts.application.dtos.user import (
    REQUEST_RECORDS,
    ChangePasswordRequest,
    CreateUserRequest,
    GetUserRequest,
)
from accounts.application.services.validation import (
    RuleDefinitionError,
    Validator,
    error_message,
)
from accounts.domain.exceptions import ValidationException

PASSWORD_MESSAGE = (
    "field 'password' must be at least 8 characters long and contain at least one "
    "uppercase letter, one lowercase letter, one number, and one special character"
)

VALID = {"email": "alice@acme.io", "username": "alice01", "password": "Testando123@"}


class Quota(BaseModel):
    count: int = Field(ge=1, le=10)
    ratio: float = Field(default=0.5, le=1)


class Profile(BaseModel):
    Nickname: Annotated[str, Field(pattern=ALPHA_PATTERN)]
    color: Literal["red", "green", "blue"] = "red"
    born: date = date(2000, 1, 31)
    pin: Annotated[str, Field(pattern=NUMERIC_PATTERN)] = "1234"


class Counter(BaseModel):
    n: int

    @field_validator("n")
    @classmethod
    def must_be_even(cls, v: int) -> int:
        if v % 2:
            raise PydanticCustomError("even", "value must be even")
        return v


class TestStrongPassword:
    """Password rule: length >= 8 and a symbol, an upper, a lower and a digit."""

    @pytest.mark.parametrize(
        "password",
        ["Testando123", "testando123@", "TESTANDO123@", "TESTanDO@#$#", "Te1@", ""],
    )
    def test_rejects(self, password: str) -> None:
        assert is_strong_password(password) is False

    @pytest.mark.parametrize("password", ["Testando123", "testando123@", "Te1@"])
    def test_rejected_password_message(self, validator: Validator, password: str) -> None:
        errors = validator.validate(CreateUserRequest, {**VALID, "password": password})
        assert [e.message for e in errors] == [PASSWORD_MESSAGE]

    @pytest.mark.parametrize("password", ["Testando123@", "aB3$efgh", "Pass word 9"])
    def test_accepts(self, validator: Validator, password: str) -> None:
        assert is_strong_password(password) is True
        assert validator.validate(CreateUserRequest, {**VALID, "password": password}) == []


class TestCreateUserRequest:
    def test_valid_request_has_no_errors(self, validator: Validator) -> None:
        assert validator.validate(CreateUserRequest, VALID) == []

    def test_missing_fields_report_required_in_field_order(self, validator: Validator) -> None:
        errors = validator.validate(CreateUserRequest, {})
        assert [e.field for e in errors] == ["email", "username", "password"]
        assert [e.tag for e in errors] == ["required", "required", "required"]
        assert errors[0].message == "field 'email' is required"

    def test_empty_strings_are_required_failures(self, validator: Validator) -> None:
        errors = validator.validate(
            CreateUserRequest, {"email": "", "username": "", "password": ""}
        )
        assert [e.tag for e in errors] == ["required", "required", "required"]

    def test_first_failing_rule_wins_per_field(self, validator: Validator) -> None:
        errors = validator.validate(CreateUserRequest, {**VALID, "email": "nope", "username": "a!"})
        assert [(e.field, e.tag) for e in errors] == [("email", "email"), ("username", "min")]
        assert errors[0].message == "field 'email' must be a valid email address"
        assert errors[1].message == "field 'username' must be at least 3 characters long"

    def test_non_string_email_is_an_email_failure(self, validator: Validator) -> None:
        errors = validator.validate(CreateUserRequest, {**VALID, "email": 5})
        assert [e.message for e in errors] == ["field 'email' must be a valid email address"]

    def test_username_bounds_and_charset(self, validator: Validator) -> None:
        too_long = validator.validate(CreateUserRequest, {**VALID, "username": "a" * 51})
        assert too_long[0].message == "field 'username' must be at most 50 characters long"
        spaced = validator.validate(CreateUserRequest, {**VALID, "username": "alice smith"})
        assert spaced[0].message == "field 'username' must contain only alphanumeric characters"

    def test_parse_raises_with_all_messages(self, validator: Validator) -> None:
        with pytest.raises(ValidationException) as exc_info:
            validator.parse(
                CreateUserRequest,
                {"email": "alice@acme.io", "username": "al", "password": "weak"},
            )
        assert exc_info.value.errors == [
            "field 'username' must be at least 3 characters long",
            PASSWORD_MESSAGE,
        ]

    def test_parse_returns_records_unchanged(self, validator: Validator) -> None:
        record = CreateUserRequest(**VALID)
        assert validator.parse(CreateUserRequest, record) is record
        assert validator.parse(CreateUserRequest, VALID) == record


class TestOtherRecords:
    def test_empty_selectors_are_skipped(self, validator: Validator) -> None:
        record = validator.parse(GetUserRequest, {"id": "anything", "email": "", "username": ""})
        assert record.email is None
        assert record.username is None
        errors = validator.validate(GetUserRequest, {"email": "broken"})
        assert [e.tag for e in errors] == ["email"]

    def test_change_password_id_must_be_uuid(self, validator: Validator) -> None:
        errors = validator.validate(
            ChangePasswordRequest, {"id": "123", "password": "Testando123@"}
        )
        assert [e.message for e in errors] == ["field 'id' failed validation for tag 'uuid'"]


class TestMessages:
    def test_numeric_bounds_use_value_wording(self) -> None:
        v = Validator(Quota)
        assert v.validate(Quota, {"count": 0})[0].message == "field 'count' must be at least 1"
        assert v.validate(Quota, {"count": 11})[0].message == "field 'count' must be at most 10"
        assert v.validate(Quota, {"count": 5, "ratio": 1.5})[0].message == (
            "field 'ratio' must be at most 1"
        )
        assert v.validate(Quota, {"count": 5}) == []

    def test_field_names_are_lowercased(self) -> None:
        errors = Validator(Profile).validate(Profile, {})
        assert [e.message for e in errors] == ["field 'nickname' is required"]

    def test_table_entries(self) -> None:
        errors = Validator(Profile).validate(
            Profile,
            {"Nickname": "bob1", "color": "pink", "born": "2000-13-01", "pin": "12a"},
        )
        assert [e.message for e in errors] == [
            "field 'nickname' must contain only alphabetic characters",
            "field 'color' must be one of [red green blue]",
            "field 'born' must be a valid datetime in YYYY-MM-DD format",
            "field 'pin' must be a valid number",
        ]
        assert Validator(Profile).validate(Profile, {"Nickname": "bob", "pin": "-3.5"}) == []

    def test_unknown_tag_gets_generic_message(self) -> None:
        errors = Validator(Counter).validate(Counter, {"n": 3})
        assert [(e.tag, e.message) for e in errors] == [
            ("even", "field 'n' failed validation for tag 'even'")
        ]
        assert error_message("x", "whatever") == "field 'x' failed validation for tag 'whatever'"

    def test_min_wording_depends_on_bound_kind(self) -> None:
        assert error_message("age", "min", "18", numeric=True) == "field 'age' must be at least 18"
        assert error_message("name", "min", "3") == (
            "field 'name' must be at least 3 characters long"
        )
        assert error_message("pin", "len", "4") == "field 'pin' must be exactly 4 characters long"


class TestRecordDefinitions:
    def test_request_records_build(self) -> None:
        assert Validator(*REQUEST_RECORDS).record_types == REQUEST_RECORDS

    def test_unresolvable_annotation_fails_at_construction(self) -> None:
        class Dangling(BaseModel):
            owner: "MissingOwner"  # noqa: F821

        with pytest.raises(RuleDefinitionError):
            Validator(CreateUserRequest, Dangling)

    @pytest.mark.parametrize("record_type", [int, dict, "CreateUserRequest"])
    def test_non_model_types_rejected(self, record_type) -> None:
        with pytest.raises(RuleDefinitionError):
            Validator(record_type)
