"""Application DTOs (no ORM dependency)."""

from accounts.application.dtos.user import (
    ChangePasswordRequest,
    CreateUserRequest,
    DeleteUserParams,
    DeleteUserRequest,
    GetUserRequest,
    InsertUserParams,
    ListUsersParams,
    ListUsersRequest,
    LookupByEmailParams,
    LookupByIdParams,
    LookupByIdsParams,
    LookupByUsernameParams,
    REQUEST_RECORDS,
    UpdatePasswordParams,
    UserRecord,
    UserResult,
)

__all__ = [
    "ChangePasswordRequest",
    "CreateUserRequest",
    "DeleteUserParams",
    "DeleteUserRequest",
    "GetUserRequest",
    "InsertUserParams",
    "ListUsersParams",
    "ListUsersRequest",
    "LookupByEmailParams",
    "LookupByIdParams",
    "LookupByIdsParams",
    "LookupByUsernameParams",
    "REQUEST_RECORDS",
    "UpdatePasswordParams",
    "UserRecord",
    "UserResult",
]
