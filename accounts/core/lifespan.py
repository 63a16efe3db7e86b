"""Application lifespan: startup and shutdown.

Wiring only: logging, the connection provider, the validator and the user
service are built here and stored on app.state; the provider is closed on
shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from accounts.application.dtos.user import REQUEST_RECORDS
from accounts.application.services.user_service import UserService
from accounts.application.services.validation import Validator
from accounts.core.config import Settings, get_settings
from accounts.infrastructure.persistence.database import ConnectionProvider
from accounts.infrastructure.persistence.repositories.user_repo import UserRepository
from accounts.infrastructure.security.password import PasswordHasher
from accounts.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


def build_user_service(provider: ConnectionProvider, settings: Settings) -> UserService:
    """Compose the user service over provider; builds every request record up front."""
    return UserService(
        UserRepository(provider),
        Validator(*REQUEST_RECORDS),
        PasswordHasher(settings.bcrypt_rounds),
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup fails (and the app does not serve) if a request record declares
    a malformed validation rule. The database is not contacted until the
    first request.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    provider = ConnectionProvider.from_settings(settings)
    app.state.db_provider = provider
    app.state.user_service = build_user_service(provider, settings)
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    yield

    # ---- Shutdown ----
    await provider.close()
    logger.info("Connection provider closed")
