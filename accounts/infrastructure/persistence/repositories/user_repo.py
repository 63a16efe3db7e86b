"""User repository over the connection provider. Interface methods return application DTOs.

Statements are built with SQLAlchemy Core against the users/sessions tables
by the module-level builders below. Lookups hide soft-deleted rows unless
include_deleted is set. Delete runs in an explicit transaction that always
ends in exactly one commit or rollback.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import Delete, Insert, Select, Update, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from accounts.application.dtos.user import (
    DeleteUserParams,
    InsertUserParams,
    ListUsersParams,
    LookupByEmailParams,
    LookupByIdParams,
    LookupByIdsParams,
    LookupByUsernameParams,
    UpdatePasswordParams,
    UserRecord,
)
from accounts.domain.exceptions import (
    TransactionFailureException,
    UserAlreadyExistsException,
)
from accounts.infrastructure.persistence.models import User, UserSession
from accounts.infrastructure.persistence.models.user import USERNAME_ACTIVE_INDEX
from accounts.shared.telemetry import add_span_attributes, traced
from accounts.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncTransaction

    from accounts.application.interfaces.repositories import IConnectionProvider

logger = logging.getLogger(__name__)

users = User.__table__
sessions = UserSession.__table__

_USER_COLUMNS = (
    users.c.id,
    users.c.email,
    users.c.username,
    users.c.password,
    users.c.created_at,
    users.c.updated_at,
    users.c.deleted_at,
)


def _active_only(stmt: Any, include_deleted: bool) -> Any:
    if include_deleted:
        return stmt
    return stmt.where(users.c.deleted_at.is_(None))


def lookup_statement(column: str, value: Any, include_deleted: bool = False) -> Select:
    """SELECT one user where <column> = value (active rows unless include_deleted)."""
    stmt = select(*_USER_COLUMNS).where(users.c[column] == value)
    return _active_only(stmt, include_deleted)


def lookup_by_ids_statement(ids: tuple[UUID, ...], include_deleted: bool = False) -> Select:
    """SELECT users whose id is in ids. Callers must not pass an empty tuple."""
    stmt = select(*_USER_COLUMNS).where(users.c.id.in_(ids))
    return _active_only(stmt, include_deleted)


def list_statement(limit: int, offset: int, include_deleted: bool = False) -> Select:
    """SELECT a page of users ordered by created_at, then id."""
    stmt = _active_only(select(*_USER_COLUMNS), include_deleted)
    return stmt.order_by(users.c.created_at, users.c.id).limit(limit).offset(offset)


def insert_statement(params: InsertUserParams) -> Insert:
    return (
        insert(users)
        .values(
            email=params.email,
            username=params.username,
            password=params.password_hash,
        )
        .returning(*_USER_COLUMNS)
    )


def update_password_statement(params: UpdatePasswordParams) -> Update:
    return (
        update(users)
        .where(users.c.id == params.user_id)
        .values(password=params.password_hash, updated_at=func.now())
        .returning(*_USER_COLUMNS)
    )


def delete_statements(params: DeleteUserParams) -> list[Update | Delete]:
    """Statements run inside the delete transaction, in order.

    Soft: set deleted_at. Hard: remove the user's sessions, then the user.
    """
    if not params.hard:
        return [
            update(users)
            .where(users.c.id == params.user_id)
            .values(deleted_at=utc_now())
        ]
    return [
        delete(sessions).where(sessions.c.user_id == params.user_id),
        delete(users).where(users.c.id == params.user_id),
    ]


def _row_to_record(row: Any) -> UserRecord:
    """Map a result row mapping to UserRecord."""
    return UserRecord(
        id=row["id"],
        email=row["email"],
        username=row["username"],
        password=row["password"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row["deleted_at"],
    )


_CONSTRAINT_RE = re.compile(r'unique constraint "([^"]+)"')


def _violated_constraint(exc: IntegrityError) -> str | None:
    """Name of the unique index behind exc.

    asyncpg exposes it as constraint_name on the driver error SQLAlchemy
    wraps; otherwise it is read from the quoted name in the message, never
    from the DETAIL line, which echoes the offending value.
    """
    driver_error = getattr(exc.orig, "__cause__", None)
    name = getattr(driver_error, "constraint_name", None) or getattr(
        exc.orig, "constraint_name", None
    )
    if name:
        return name
    match = _CONSTRAINT_RE.search(str(exc.orig))
    return match.group(1) if match else None


def _conflicting_field(exc: IntegrityError) -> str:
    return "username" if _violated_constraint(exc) == USERNAME_ACTIVE_INDEX else "email"


class UserRepository:
    """Postgres implementation of IUserRepository.

    Holds no state between calls beyond its provider; every call acquires
    the pooled engine and checks a connection out for the statement.
    """

    def __init__(self, provider: IConnectionProvider) -> None:
        self._provider = provider

    async def _fetch_one(self, stmt: Any) -> UserRecord | None:
        engine = await self._provider.acquire()
        async with engine.connect() as conn:
            result = await conn.execute(stmt)
            row = result.mappings().first()
        return _row_to_record(row) if row is not None else None

    async def _fetch_all(self, stmt: Any) -> list[UserRecord]:
        engine = await self._provider.acquire()
        async with engine.connect() as conn:
            result = await conn.execute(stmt)
            rows = result.mappings().all()
        return [_row_to_record(row) for row in rows]

    @traced("user_repository.lookup_by_email")
    async def lookup_by_email(self, params: LookupByEmailParams) -> UserRecord | None:
        logger.info("Looking up user by email")
        user = await self._fetch_one(
            lookup_statement("email", params.email, params.include_deleted)
        )
        if user is None:
            logger.warning("No user with the given email")
        return user

    @traced("user_repository.lookup_by_username")
    async def lookup_by_username(
        self, params: LookupByUsernameParams
    ) -> UserRecord | None:
        logger.info("Looking up user by username %s", params.username)
        user = await self._fetch_one(
            lookup_statement("username", params.username, params.include_deleted)
        )
        if user is None:
            logger.warning("No user with username %s", params.username)
        return user

    @traced("user_repository.lookup_by_id")
    async def lookup_by_id(self, params: LookupByIdParams) -> UserRecord | None:
        logger.info("Looking up user %s", params.user_id)
        user = await self._fetch_one(
            lookup_statement("id", params.user_id, params.include_deleted)
        )
        if user is None:
            logger.warning("No user with id %s", params.user_id)
        return user

    @traced("user_repository.lookup_by_ids")
    async def lookup_by_ids(self, params: LookupByIdsParams) -> list[UserRecord]:
        if not params.ids:
            return []
        logger.info("Looking up %d users by id", len(params.ids))
        found = await self._fetch_all(
            lookup_by_ids_statement(params.ids, params.include_deleted)
        )
        add_span_attributes(found=len(found))
        logger.info("Found %d of %d users", len(found), len(params.ids))
        return found

    @traced("user_repository.list_users")
    async def list_users(self, params: ListUsersParams) -> list[UserRecord]:
        logger.info("Listing users (limit=%d, offset=%d)", params.limit, params.offset)
        page = await self._fetch_all(
            list_statement(params.limit, params.offset, params.include_deleted)
        )
        add_span_attributes(found=len(page))
        return page

    @traced("user_repository.insert")
    async def insert(self, params: InsertUserParams) -> UserRecord:
        """Insert a user; raise UserAlreadyExistsException on an active-uniqueness violation."""
        logger.info("Inserting user %s", params.username)
        engine = await self._provider.acquire()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(insert_statement(params))
                row = result.mappings().one()
        except IntegrityError as exc:
            field = _conflicting_field(exc)
            logger.warning("Insert rejected by unique index on %s", field)
            value = params.username if field == "username" else params.email
            raise UserAlreadyExistsException(field, value) from exc
        user = _row_to_record(row)
        logger.info("Inserted user %s", user.id)
        return user

    @traced("user_repository.update_password")
    async def update_password(self, params: UpdatePasswordParams) -> UserRecord | None:
        logger.info("Updating password for user %s", params.user_id)
        engine = await self._provider.acquire()
        async with engine.begin() as conn:
            result = await conn.execute(update_password_statement(params))
            row = result.mappings().first()
        if row is None:
            logger.warning("Password update matched no user %s", params.user_id)
            return None
        return _row_to_record(row)

    @traced("user_repository.delete")
    async def delete(self, params: DeleteUserParams) -> None:
        """Soft or hard delete in one transaction.

        Raises:
            TransactionFailureException: begin, a statement, or commit failed; the
                store error is chained. A failed rollback is logged, never raised.
        """
        mode = "hard" if params.hard else "soft"
        resource_id = str(params.user_id)
        logger.info("Deleting user %s (%s)", params.user_id, mode)
        engine = await self._provider.acquire()
        async with engine.connect() as conn:
            try:
                tx = await conn.begin()
            except Exception as exc:
                logger.error("Delete of user %s: begin failed", params.user_id, exc_info=True)
                raise TransactionFailureException("delete", "begin", resource_id) from exc

            try:
                for stmt in delete_statements(params):
                    await conn.execute(stmt)
            except Exception as exc:
                logger.error(
                    "Delete of user %s failed; rolling back", params.user_id, exc_info=True
                )
                await self._rollback(tx, params.user_id)
                raise TransactionFailureException("delete", "step", resource_id) from exc
            except BaseException:
                await self._rollback(tx, params.user_id)
                raise

            try:
                await tx.commit()
            except Exception as exc:
                logger.error("Delete of user %s: commit failed", params.user_id, exc_info=True)
                raise TransactionFailureException("delete", "commit", resource_id) from exc
        logger.info("Deleted user %s (%s)", params.user_id, mode)

    @staticmethod
    async def _rollback(tx: AsyncTransaction, user_id: UUID) -> None:
        try:
            await tx.rollback()
        except Exception:
            logger.error("Rollback failed for delete of user %s", user_id, exc_info=True)
