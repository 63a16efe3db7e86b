"""Pydantic request/response schemas for the HTTP API."""

from accounts.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)
from accounts.schemas.user import (
    PasswordChangeRequest,
    UserBatchRequest,
    UserCreateRequest,
    UserResponse,
)

__all__ = [
    "HealthResponse",
    "PasswordChangeRequest",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "UserBatchRequest",
    "UserCreateRequest",
    "UserResponse",
]
