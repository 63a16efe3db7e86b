"""User API: thin routes delegating to UserService.

Domain exceptions raised by the service are turned into responses by the
handlers in accounts.core.exception_handlers.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Response

from accounts.api.v1.dependencies import get_user_service
from accounts.application.dtos.user import UserResult
from accounts.application.services.user_service import UserService
from accounts.schemas.user import (
    PasswordChangeRequest,
    UserBatchRequest,
    UserCreateRequest,
    UserResponse,
)

router = APIRouter()


def _to_response(result: UserResult) -> UserResponse:
    return UserResponse(**asdict(result))


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    body: UserCreateRequest,
    user_service: UserService = Depends(get_user_service),
):
    """Create a user."""
    result = await user_service.create_user(body.model_dump())
    return _to_response(result)


@router.get("", response_model=list[UserResponse])
async def list_users(
    limit: int = 0,
    offset: int = 0,
    user_service: UserService = Depends(get_user_service),
):
    """List active users (limit defaults to 20, capped at 100)."""
    results = await user_service.list_users({"limit": limit, "offset": offset})
    return [_to_response(r) for r in results]


@router.get("/lookup", response_model=UserResponse)
async def lookup_user(
    email: str = "",
    username: str = "",
    user_service: UserService = Depends(get_user_service),
):
    """Get an active user by email or by username (exactly one)."""
    result = await user_service.get_user({"email": email, "username": username})
    return _to_response(result)


@router.post("/batch", response_model=list[UserResponse])
async def get_users(
    body: UserBatchRequest,
    user_service: UserService = Depends(get_user_service),
):
    """Get active users by id; unknown ids are left out."""
    results = await user_service.get_users(body.ids)
    return [_to_response(r) for r in results]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
):
    """Get an active user by id."""
    result = await user_service.get_user({"id": user_id})
    return _to_response(result)


@router.put("/{user_id}/password", status_code=204)
async def change_password(
    user_id: str,
    body: PasswordChangeRequest,
    user_service: UserService = Depends(get_user_service),
) -> Response:
    """Replace an active user's password."""
    await user_service.change_password({"id": user_id, "password": body.password})
    return Response(status_code=204)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    hard: bool = False,
    user_service: UserService = Depends(get_user_service),
) -> Response:
    """Soft delete a user, or remove it and its sessions when hard=true."""
    await user_service.delete_user({"id": user_id, "hard": hard})
    return Response(status_code=204)
