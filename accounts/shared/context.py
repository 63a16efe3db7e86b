"""Request context management using contextvars.

Provides async-safe storage for request-scoped data (the request id), so
log records emitted anywhere below the middleware can be correlated.

Usage:
    token = set_request_id("3f2a...")
    request_id = get_request_id()
    reset_request_id(token)
"""

from contextvars import ContextVar, Token

_current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


def set_request_id(request_id: str | None) -> Token:
    """Set the request id for the current task; returns a token for reset_request_id."""
    return _current_request_id.set(request_id)


def reset_request_id(token: Token) -> None:
    """Restore the request id that was current before set_request_id."""
    _current_request_id.reset(token)


def get_request_id() -> str | None:
    """Return the current request id, or None outside a request."""
    return _current_request_id.get()
