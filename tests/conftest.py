"""Pytest configuration and fixtures for the account service.

HTTP tests use accounts.main:app with the user service swapped for one
backed by an in-memory repository. Repository integration tests need
Postgres: set TEST_DATABASE_URL (postgresql+asyncpg://...) or they skip.
"""

import dataclasses
import os
import uuid
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("ENVIRONMENT", "test")

from accounts.api.v1.dependencies import get_connection_provider, get_user_service  # noqa: E402
from accounts.application.dtos.user import (  # noqa: E402
    DeleteUserParams,
    InsertUserParams,
    ListUsersParams,
    LookupByEmailParams,
    LookupByIdParams,
    LookupByIdsParams,
    LookupByUsernameParams,
    REQUEST_RECORDS,
    UpdatePasswordParams,
    UserRecord,
)
from accounts.application.services.user_service import UserService  # noqa: E402
from accounts.application.services.validation import Validator  # noqa: E402
from accounts.domain.exceptions import UserAlreadyExistsException  # noqa: E402
from accounts.infrastructure.persistence.database import Base, ConnectionProvider  # noqa: E402
from accounts.infrastructure.security.password import PasswordHasher  # noqa: E402
from accounts.main import app  # noqa: E402
from accounts.shared.utils.datetime import utc_now  # noqa: E402


class InMemoryUserRepository:
    """IUserRepository over dicts. Mirrors the Postgres semantics the service relies on.

    ``failures`` maps a method name to an exception raised on the next call to it.
    ``calls`` records (method name, params) for every call.
    """

    def __init__(self) -> None:
        self.users: dict[uuid.UUID, UserRecord] = {}
        self.sessions: dict[uuid.UUID, list[str]] = {}
        self.failures: dict[str, BaseException] = {}
        self.calls: list[tuple[str, Any]] = []

    def _enter(self, name: str, params: Any) -> None:
        self.calls.append((name, params))
        failure = self.failures.pop(name, None)
        if failure is not None:
            raise failure

    def _visible(self, include_deleted: bool) -> list[UserRecord]:
        rows = sorted(self.users.values(), key=lambda u: (u.created_at, str(u.id)))
        return [u for u in rows if include_deleted or u.deleted_at is None]

    def _find(self, include_deleted: bool, **match: Any) -> UserRecord | None:
        for user in self._visible(include_deleted):
            if all(getattr(user, k) == v for k, v in match.items()):
                return user
        return None

    async def lookup_by_email(self, params: LookupByEmailParams) -> UserRecord | None:
        self._enter("lookup_by_email", params)
        return self._find(params.include_deleted, email=params.email)

    async def lookup_by_username(self, params: LookupByUsernameParams) -> UserRecord | None:
        self._enter("lookup_by_username", params)
        return self._find(params.include_deleted, username=params.username)

    async def lookup_by_id(self, params: LookupByIdParams) -> UserRecord | None:
        self._enter("lookup_by_id", params)
        return self._find(params.include_deleted, id=params.user_id)

    async def lookup_by_ids(self, params: LookupByIdsParams) -> list[UserRecord]:
        self._enter("lookup_by_ids", params)
        wanted = set(params.ids)
        return [u for u in self._visible(params.include_deleted) if u.id in wanted]

    async def list_users(self, params: ListUsersParams) -> list[UserRecord]:
        self._enter("list_users", params)
        rows = self._visible(params.include_deleted)
        return rows[params.offset : params.offset + params.limit]

    async def insert(self, params: InsertUserParams) -> UserRecord:
        self._enter("insert", params)
        if self._find(False, email=params.email):
            raise UserAlreadyExistsException("email", params.email)
        if self._find(False, username=params.username):
            raise UserAlreadyExistsException("username", params.username)
        now = utc_now()
        user = UserRecord(
            id=uuid.uuid4(),
            email=params.email,
            username=params.username,
            password=params.password_hash,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        return user

    async def update_password(self, params: UpdatePasswordParams) -> UserRecord | None:
        self._enter("update_password", params)
        user = self.users.get(params.user_id)
        if user is None:
            return None
        user = dataclasses.replace(
            user, password=params.password_hash, updated_at=utc_now()
        )
        self.users[user.id] = user
        return user

    async def delete(self, params: DeleteUserParams) -> None:
        self._enter("delete", params)
        if params.hard:
            self.sessions.pop(params.user_id, None)
            self.users.pop(params.user_id, None)
            return
        user = self.users.get(params.user_id)
        if user is not None:
            self.users[user.id] = dataclasses.replace(user, deleted_at=utc_now())


class StubConnectionProvider:
    """Connection provider double for readiness checks."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.error = error

    async def acquire(self) -> object:
        if self.error is not None:
            raise self.error
        return object()

    async def close(self) -> None:
        return None


@pytest.fixture
def validator() -> Validator:
    """Validator with every request record built."""
    return Validator(*REQUEST_RECORDS)


@pytest.fixture
def fake_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def user_service(fake_repo: InMemoryUserRepository, validator: Validator) -> UserService:
    """UserService over the in-memory repository (bcrypt cost 4 for speed)."""
    return UserService(fake_repo, validator, PasswordHasher(rounds=4))


@pytest.fixture
def stub_provider() -> StubConnectionProvider:
    return StubConnectionProvider()


@pytest.fixture
async def client(
    user_service: UserService, stub_provider: StubConnectionProvider
) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with in-memory dependencies."""
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_connection_provider] = lambda: stub_provider
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def db_provider() -> ConnectionProvider:
    """ConnectionProvider on TEST_DATABASE_URL with the schema created.

    Skips (pytest.skip) when TEST_DATABASE_URL is not set. Use
    @pytest.mark.requires_db on tests that need it; run without a DB via
    pytest -m 'not requires_db'.
    """
    url = os.environ.get("TEST_DATABASE_URL")
    if not url:
        pytest.skip("Postgres not configured: set TEST_DATABASE_URL")
    import accounts.infrastructure.persistence.models  # noqa: F401

    provider = ConnectionProvider(url, pool_size=5)
    engine = await provider.acquire()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield provider
    await provider.close()
