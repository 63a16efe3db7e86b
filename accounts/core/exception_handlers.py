"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps the FailureKind of
domain exceptions to HTTP status codes. Requests FastAPI cannot parse are
reported like any other invalid input (400); anything else becomes an
opaque 500.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts.application.services.validation import field_errors
from accounts.core.config import get_settings
from accounts.domain.enums import FailureKind
from accounts.domain.exceptions import AccountsException, ValidationException

logger = logging.getLogger(__name__)

KIND_STATUS: dict[FailureKind, int] = {
    FailureKind.INVALID_INPUT: 400,
    FailureKind.NOT_FOUND: 404,
    FailureKind.ALREADY_EXISTS: 409,
    FailureKind.INTERNAL: 500,
}


def _accounts_exception_handler(
    request: Request, exc: AccountsException
) -> JSONResponse:
    """Return JSON from AccountsException.to_dict() with the status for its kind."""
    return JSONResponse(
        status_code=KIND_STATUS.get(exc.kind, 500),
        content=exc.to_dict(),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 in the ValidationException shape for bodies/params FastAPI could not parse."""
    errors = field_errors(exc.errors())
    logger.warning(
        "Request rejected before reaching the service: %s",
        ", ".join(f"{e.field}:{e.tag}" for e in errors),
    )
    return _accounts_exception_handler(
        request, ValidationException([e.message for e in errors])
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: AccountsException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(AccountsException, _accounts_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
