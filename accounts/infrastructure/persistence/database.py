"""Persistence: connection provider and Base for SQLAlchemy ORM.

The engine is created lazily on the first acquire, so importing this module
(or building the provider) never touches the network. Every acquire pings
the store; a failed ping disposes the engine and is reported as
DatabaseConnectionException without a retry.
"""

import asyncio
import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from accounts.core.config import Settings
from accounts.core.constants import (
    DEFAULT_CONNECTION_MAX_LIFETIME_SECONDS,
    DEFAULT_POOL_SIZE,
)
from accounts.domain.exceptions import DatabaseConnectionException

logger = logging.getLogger(__name__)

_PING = text("SELECT 1")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


class ConnectionProvider:
    """Lazily established, health-checked handle to the pooled engine.

    Safe for concurrent use: establishment is guarded by an asyncio.Lock so
    exactly one caller creates the engine; the engine itself is a pool.
    """

    def __init__(
        self,
        database_url: str,
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
        max_lifetime_seconds: int = DEFAULT_CONNECTION_MAX_LIFETIME_SECONDS,
        command_timeout: int | None = None,
        echo: bool = False,
    ) -> None:
        self._database_url = database_url
        self._pool_size = pool_size
        self._max_lifetime_seconds = max_lifetime_seconds
        self._command_timeout = command_timeout
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionProvider":
        """Build a provider from application settings."""
        return cls(
            settings.resolved_database_url,
            pool_size=settings.db_pool_size,
            max_lifetime_seconds=settings.db_connection_max_lifetime_seconds,
            command_timeout=settings.db_command_timeout,
            echo=settings.database_echo,
        )

    @property
    def is_established(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> AsyncEngine:
        connect_args: dict[str, Any] = {}
        if "postgresql" in self._database_url and self._command_timeout is not None:
            connect_args["command_timeout"] = self._command_timeout
        return create_async_engine(
            self._database_url,
            echo=self._echo,
            pool_pre_ping=True,
            pool_size=self._pool_size,
            pool_recycle=self._max_lifetime_seconds,
            connect_args=connect_args,
        )

    async def acquire(self) -> AsyncEngine:
        """Return the pooled engine after a liveness check.

        Raises:
            DatabaseConnectionException: If the engine cannot be created or the
                ping fails. The engine is disposed; the next acquire starts over.
        """
        async with self._lock:
            if self._engine is None:
                try:
                    self._engine = self._create_engine()
                except Exception as exc:
                    logger.error("Failed to create database engine", exc_info=True)
                    raise DatabaseConnectionException("engine creation failed") from exc
                logger.info(
                    "Database engine created (pool_size=%d, max_lifetime=%ds)",
                    self._pool_size,
                    self._max_lifetime_seconds,
                )
            engine = self._engine

        try:
            async with engine.connect() as conn:
                await conn.execute(_PING)
        except Exception as exc:
            logger.error("Database ping failed; closing pool", exc_info=True)
            async with self._lock:
                if self._engine is engine:
                    self._engine = None
            await engine.dispose()
            raise DatabaseConnectionException("ping failed") from exc
        return engine

    async def close(self) -> None:
        """Dispose the engine (no-op if never established).

        Raises:
            DatabaseConnectionException: If disposing the pool fails.
        """
        async with self._lock:
            engine, self._engine = self._engine, None
        if engine is None:
            return
        try:
            await engine.dispose()
        except Exception as exc:
            logger.error("Failed to close database pool", exc_info=True)
            raise DatabaseConnectionException("close failed") from exc
        logger.info("Database engine disposed")
