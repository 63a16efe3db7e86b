"""User API schemas.

Request bodies only fix the JSON shape. Field rules live on the application
request records and run in the service, so a missing field reaches the
caller as "field 'x' is required".
"""

from pydantic import BaseModel, Field


class UserCreateRequest(BaseModel):
    """Request body for creating a user."""

    email: str = ""
    username: str = ""
    password: str = ""


class PasswordChangeRequest(BaseModel):
    """Request body for replacing a user's password."""

    password: str = ""


class UserBatchRequest(BaseModel):
    """Request body for bulk lookup by id."""

    ids: list[str] = Field(default_factory=list)


class UserResponse(BaseModel):
    """User response (no password). Timestamps are RFC 3339 in UTC."""

    id: str
    email: str
    username: str
    created_at: str
    updated_at: str
