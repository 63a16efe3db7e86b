"""Health check endpoints used for liveness and readiness checks."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from accounts.api.v1.dependencies import get_connection_provider
from accounts.domain.exceptions import DatabaseConnectionException
from accounts.infrastructure.persistence.database import ConnectionProvider
from accounts.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(
    provider: ConnectionProvider = Depends(get_connection_provider),
) -> ReadinessResponse | JSONResponse:
    """Return 200 if the database answers a ping; 503 otherwise."""
    try:
        await provider.acquire()
    except DatabaseConnectionException as exc:
        logger.warning("Readiness check failed: %s", exc.details.get("reason"))
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(message=exc.message).model_dump(),
        )
    return ReadinessResponse()
