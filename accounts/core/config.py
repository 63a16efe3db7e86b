"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The database URL is validated at load time; it is either
given directly (DATABASE_URL) or assembled from the libpq-style PG* variables.
"""

from functools import lru_cache
from urllib.parse import quote

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from accounts.core.constants import (
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_CONNECTION_MAX_LIFETIME_SECONDS,
    DEFAULT_POOL_SIZE,
)

_ENVIRONMENTS = ("development", "production", "test")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_environment_and_database rejects an
    unknown environment name and an unresolvable database URL.
    """

    # App
    app_name: str = "account-service"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str | None = None

    # Database: DATABASE_URL wins; otherwise built from PG* variables.
    database_url: str = ""
    pguser: str = "postgres"
    pgpassword: SecretStr = SecretStr("")
    pghost: str = "localhost"
    pgport: int = 5432
    pgdatabase: str = "postgres"
    database_echo: bool = False
    db_pool_size: int = DEFAULT_POOL_SIZE
    db_connection_max_lifetime_seconds: int = DEFAULT_CONNECTION_MAX_LIFETIME_SECONDS
    db_command_timeout: int | None = 30

    # Security
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS

    # Request / middleware
    request_timeout_seconds: int = 30
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def resolved_database_url(self) -> str:
        """Return DATABASE_URL, or a postgresql+asyncpg URL built from PG* settings."""
        if self.database_url:
            return self.database_url
        password = quote(self.pgpassword.get_secret_value(), safe="")
        credentials = quote(self.pguser, safe="")
        if password:
            credentials = f"{credentials}:{password}"
        return (
            f"postgresql+asyncpg://{credentials}@{self.pghost}:{self.pgport}"
            f"/{self.pgdatabase}"
        )

    @model_validator(mode="after")
    def validate_environment_and_database(self) -> "Settings":
        """Validate environment name, pool limits and bcrypt cost."""
        if self.environment not in _ENVIRONMENTS:
            raise ValueError(
                f"environment must be one of {', '.join(_ENVIRONMENTS)}, "
                f"got: {self.environment!r}"
            )
        if not self.pghost and not self.database_url:
            raise ValueError(
                "DATABASE_URL or PGHOST is required. Set in environment or .env file."
            )
        if self.db_pool_size < 1:
            raise ValueError("db_pool_size must be at least 1")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
