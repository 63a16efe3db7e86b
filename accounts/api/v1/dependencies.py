"""Presentation-layer dependency injection.

The lifespan builds the service graph once and stores it on app.state;
routes depend on these getters only, so tests can swap them through
app.dependency_overrides.
"""

from fastapi import Request

from accounts.application.services.user_service import UserService
from accounts.infrastructure.persistence.database import ConnectionProvider


def get_user_service(request: Request) -> UserService:
    """Return the UserService built at startup."""
    return request.app.state.user_service


def get_connection_provider(request: Request) -> ConnectionProvider:
    """Return the ConnectionProvider built at startup."""
    return request.app.state.db_provider
