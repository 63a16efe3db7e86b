"""DTOs for user use cases (no dependency on ORM).

Three families live here: the persisted row (UserRecord), repository
parameter records (one per operation), and handler request records. Request
records are pydantic models whose field types carry the validation rules
(see accounts.application.dtos.fields).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel

from accounts.application.dtos.fields import (
    OptionalEmail,
    OptionalUsername,
    Required,
    RequiredEmail,
    RequiredUsername,
    StrongPassword,
)


@dataclass(frozen=True)
class UserRecord:
    """A users row as returned by the repository. ``password`` is the stored hash."""

    id: UUID
    email: str
    username: str
    password: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """True while the row has not been soft-deleted."""
        return self.deleted_at is None


@dataclass(frozen=True)
class UserResult:
    """User projection returned to callers (no password). Timestamps are RFC 3339 strings."""

    id: str
    email: str
    username: str
    created_at: str
    updated_at: str


# Repository parameters


@dataclass(frozen=True)
class LookupByEmailParams:
    email: str
    include_deleted: bool = False


@dataclass(frozen=True)
class LookupByUsernameParams:
    username: str
    include_deleted: bool = False


@dataclass(frozen=True)
class LookupByIdParams:
    user_id: UUID
    include_deleted: bool = False


@dataclass(frozen=True)
class LookupByIdsParams:
    ids: tuple[UUID, ...]
    include_deleted: bool = False


@dataclass(frozen=True)
class ListUsersParams:
    limit: int
    offset: int
    include_deleted: bool = False


@dataclass(frozen=True)
class InsertUserParams:
    email: str
    username: str
    password_hash: str


@dataclass(frozen=True)
class UpdatePasswordParams:
    user_id: UUID
    password_hash: str


@dataclass(frozen=True)
class DeleteUserParams:
    user_id: UUID
    hard: bool = False


# Handler requests


class CreateUserRequest(BaseModel):
    """CreateUser{email, username, password}."""

    email: RequiredEmail
    username: RequiredUsername
    password: StrongPassword


class GetUserRequest(BaseModel):
    """GetUser{id} | {email} | {username}: exactly one selector must be set."""

    id: str = ""
    email: OptionalEmail = None
    username: OptionalUsername = None


class ListUsersRequest(BaseModel):
    """ListUsers{limit, offset}; out-of-range values are clamped, not rejected."""

    limit: int = 0
    offset: int = 0


class ChangePasswordRequest(BaseModel):
    id: Annotated[UUID, Required]
    password: StrongPassword


class DeleteUserRequest(BaseModel):
    id: str = ""
    hard: bool = False


REQUEST_RECORDS: tuple[type[BaseModel], ...] = (
    CreateUserRequest,
    GetUserRequest,
    ListUsersRequest,
    ChangePasswordRequest,
    DeleteUserRequest,
)
