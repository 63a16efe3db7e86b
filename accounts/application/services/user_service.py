"""User application service: validate, call the repository, map the result.

Failures reach callers as AccountsException subclasses. Store, connection
and transaction errors are logged here with full detail and replaced by an
opaque InternalServiceException; not-found and already-exists are reported
precisely.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import Any, TypeVar
from uuid import UUID

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
    UpdatePasswordParams,
    UserRecord,
    UserResult,
)
from accounts.application.interfaces.repositories import IUserRepository
from accounts.application.services.validation import Validator
from accounts.core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from accounts.domain.enums import FailureKind
from accounts.domain.exceptions import (
    AccountsException,
    InternalServiceException,
    InvalidIdentifierException,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)
from accounts.shared.utils.datetime import format_wire_timestamp

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _user_to_result(u: UserRecord) -> UserResult:
    """Build UserResult from a repository row (no password)."""
    return UserResult(
        id=str(u.id),
        email=u.email,
        username=u.username,
        created_at=format_wire_timestamp(u.created_at),
        updated_at=format_wire_timestamp(u.updated_at),
    )


def parse_user_id(value: Any) -> UUID:
    """Parse a user id; raise InvalidIdentifierException if it is not a UUID."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentifierException(str(value))
    try:
        return UUID(value)
    except ValueError:
        raise InvalidIdentifierException(value) from None


def clamp_page(limit: int, offset: int) -> tuple[int, int]:
    """Clamp paging: limit <= 0 -> 20, limit > 100 -> 100, offset < 0 -> 0."""
    if limit <= 0:
        limit = DEFAULT_PAGE_LIMIT
    elif limit > MAX_PAGE_LIMIT:
        limit = MAX_PAGE_LIMIT
    return limit, max(offset, 0)


class UserService:
    """Create, fetch, list, re-password and delete users.

    Operations take a request record or the raw mapping to build one from;
    mappings are validated first and fail with ValidationException.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        validator: Validator,
        password_hasher: Any,
    ) -> None:
        self._user_repo = user_repo
        self._validator = validator
        self._password_hasher = password_hasher

    async def create_user(self, data: CreateUserRequest | Mapping[str, Any]) -> UserResult:
        """Validate, reject active duplicates (email first, then username), hash, insert."""
        request = self._validator.parse(CreateUserRequest, data)

        existing = await self._store(
            "lookup_by_email",
            self._user_repo.lookup_by_email(LookupByEmailParams(email=request.email)),
        )
        if existing is not None:
            logger.warning("Create rejected: email already in use")
            raise UserAlreadyExistsException("email", request.email)

        existing = await self._store(
            "lookup_by_username",
            self._user_repo.lookup_by_username(
                LookupByUsernameParams(username=request.username)
            ),
        )
        if existing is not None:
            logger.warning("Create rejected: username %s already in use", request.username)
            raise UserAlreadyExistsException("username", request.username)

        password_hash = await asyncio.to_thread(
            self._password_hasher.hash_password, request.password
        )
        created = await self._store(
            "insert",
            self._user_repo.insert(
                InsertUserParams(
                    email=request.email,
                    username=request.username,
                    password_hash=password_hash,
                )
            ),
            "failed to create user",
        )
        logger.info("Created user %s", created.id)
        return _user_to_result(created)

    async def get_user(self, data: GetUserRequest | Mapping[str, Any]) -> UserResult:
        """Fetch one active user by exactly one of id, email or username."""
        request = self._validator.parse(GetUserRequest, data)
        selectors = [name for name in ("id", "email", "username") if getattr(request, name)]
        if len(selectors) != 1:
            logger.warning("Get rejected: %d selectors given", len(selectors))
            raise ValidationException(["exactly one of id, email or username is required"])

        if request.id:
            user_id = parse_user_id(request.id)
            user = await self._store(
                "lookup_by_id", self._user_repo.lookup_by_id(LookupByIdParams(user_id=user_id))
            )
        elif request.email:
            user = await self._store(
                "lookup_by_email",
                self._user_repo.lookup_by_email(LookupByEmailParams(email=request.email)),
            )
        else:
            user = await self._store(
                "lookup_by_username",
                self._user_repo.lookup_by_username(
                    LookupByUsernameParams(username=request.username)
                ),
            )
        if user is None:
            lookup = selectors[0]
            logger.warning("User not found by %s", lookup)
            raise UserNotFoundException(lookup, getattr(request, lookup))
        return _user_to_result(user)

    async def get_users(self, ids: list[str]) -> list[UserResult]:
        """Fetch active users by id; unknown ids are simply absent from the result."""
        parsed = tuple(parse_user_id(value) for value in ids)
        if not parsed:
            return []
        users = await self._store(
            "lookup_by_ids", self._user_repo.lookup_by_ids(LookupByIdsParams(ids=parsed))
        )
        return [_user_to_result(u) for u in users]

    async def list_users(
        self, data: ListUsersRequest | Mapping[str, Any]
    ) -> list[UserResult]:
        """Page through active users ordered by creation time."""
        request = self._validator.parse(ListUsersRequest, data)
        limit, offset = clamp_page(request.limit, request.offset)
        users = await self._store(
            "list_users",
            self._user_repo.list_users(ListUsersParams(limit=limit, offset=offset)),
        )
        return [_user_to_result(u) for u in users]

    async def change_password(
        self, data: ChangePasswordRequest | Mapping[str, Any]
    ) -> UserResult:
        """Store a new password hash for an active user."""
        request = self._validator.parse(ChangePasswordRequest, data)
        user_id = request.id
        user = await self._store(
            "lookup_by_id", self._user_repo.lookup_by_id(LookupByIdParams(user_id=user_id))
        )
        if user is None:
            logger.warning("Password change for unknown user %s", user_id)
            raise UserNotFoundException("id", str(user_id))

        password_hash = await asyncio.to_thread(
            self._password_hasher.hash_password, request.password
        )
        updated = await self._store(
            "update_password",
            self._user_repo.update_password(
                UpdatePasswordParams(user_id=user_id, password_hash=password_hash)
            ),
        )
        if updated is None:
            # Deleted between the lookup and the update.
            raise UserNotFoundException("id", str(user_id))
        logger.info("Changed password for user %s", user_id)
        return _user_to_result(updated)

    async def delete_user(self, data: DeleteUserRequest | Mapping[str, Any]) -> None:
        """Soft or hard delete. Already soft-deleted users still count as existing."""
        request = self._validator.parse(DeleteUserRequest, data)
        user_id = parse_user_id(request.id)
        user = await self._store(
            "lookup_by_id",
            self._user_repo.lookup_by_id(
                LookupByIdParams(user_id=user_id, include_deleted=True)
            ),
        )
        if user is None:
            logger.warning("Delete for unknown user %s", user_id)
            raise UserNotFoundException("id", request.id)
        await self._store(
            "delete", self._user_repo.delete(DeleteUserParams(user_id=user_id, hard=request.hard))
        )
        logger.info("Deleted user %s (hard=%s)", user_id, request.hard)

    async def _store(
        self,
        operation: str,
        call: Awaitable[T],
        public_message: str = "internal server error",
    ) -> T:
        """Await a repository call; mask anything but not-found / already-exists."""
        try:
            return await call
        except AccountsException as exc:
            if exc.kind is not FailureKind.INTERNAL:
                raise
            logger.error("Repository %s failed: %s", operation, exc.message, exc_info=True)
            raise InternalServiceException(public_message) from exc
        except Exception as exc:
            logger.error("Repository %s failed", operation, exc_info=True)
            raise InternalServiceException(public_message) from exc
