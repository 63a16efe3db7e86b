"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports. The
handler depends on IUserRepository, so an in-memory fake can stand in for
the Postgres implementation in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
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


class IUserRepository(Protocol):
    """Protocol for the user repository (DIP).

    Lookups return None when no row matches (the "no rows" signal). Store
    errors propagate unchanged, except inside delete where they are raised
    as TransactionFailureException chained to the store error.
    """

    async def lookup_by_email(self, params: LookupByEmailParams) -> UserRecord | None:
        """Return the user with this email (active only unless include_deleted)."""

    async def lookup_by_username(
        self, params: LookupByUsernameParams
    ) -> UserRecord | None:
        """Return the user with this username (active only unless include_deleted)."""

    async def lookup_by_id(self, params: LookupByIdParams) -> UserRecord | None:
        """Return the user with this id (active only unless include_deleted)."""

    async def lookup_by_ids(self, params: LookupByIdsParams) -> list[UserRecord]:
        """Return users whose id is in params.ids, in store order. Empty ids -> []."""

    async def list_users(self, params: ListUsersParams) -> list[UserRecord]:
        """Return a page of users (limit/offset are used as given)."""

    async def insert(self, params: InsertUserParams) -> UserRecord:
        """Insert a user; id and timestamps are assigned by the store."""

    async def update_password(self, params: UpdatePasswordParams) -> UserRecord | None:
        """Store a new password hash and bump updated_at; None if no row matched."""

    async def delete(self, params: DeleteUserParams) -> None:
        """Soft delete (set deleted_at) or hard delete (sessions, then user) in one transaction."""


class IConnectionProvider(Protocol):
    """Protocol for the lazily established, health-checked store handle."""

    async def acquire(self) -> Any:
        """Return the pooled handle, establishing it on first use."""

    async def close(self) -> None:
        """Release the pooled handle."""
