"""Utility functions and decorators for distributed tracing.

Only the OpenTelemetry API is used here; without an SDK configured the
tracer is a no-op, so decorated code pays almost nothing.
"""

import dataclasses
import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Allowlist of known-safe attribute names (case-insensitive). Only these are
# recorded; emails, usernames and password hashes never reach a span.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "id", "ids", "user_id", "count", "limit", "offset",
    "hard", "include_deleted",
})


def _safe_value(value: Any) -> str:
    if isinstance(value, (list, tuple, set, frozenset)):
        return str(len(value))
    return str(value)


def _set_safe_span_attrs(span: trace.Span, values: dict[str, Any]) -> None:
    """Set span attributes from values; only allowlisted keys are recorded."""
    for key, value in values.items():
        if not key.startswith("_") and key.lower() in _SAFE_SPAN_ATTR_KEYS:
            span.set_attribute(f"arg.{key}", _safe_value(value))


def _setup_span(
    span: trace.Span,
    attributes: dict[str, str | int | float | bool] | None,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> None:
    """Set fixed attributes, then safe fields of dataclass args and safe kwargs."""
    if attributes:
        for key, value in attributes.items():
            span.set_attribute(key, value)
    for arg in args:
        if dataclasses.is_dataclass(arg) and not isinstance(arg, type):
            _set_safe_span_attrs(
                span, {f.name: getattr(arg, f.name) for f in dataclasses.fields(arg)}
            )
    _set_safe_span_attrs(span, kwargs)


def _record_error(span: trace.Span, exc: BaseException) -> None:
    span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
    span.record_exception(exc)


def traced(
    operation_name: str | None = None,
    attributes: dict | None = None,
) -> Callable:
    """Decorator to create a span for a function (sync or async).

    Args:
        operation_name: Span name (defaults to module.funcname).
        attributes: Optional dict of attributes to set on the span.

    Returns:
        Decorated function.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                _setup_span(span, attributes, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except BaseException as exc:
                    _record_error(span, exc)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                _setup_span(span, attributes, args, kwargs)
                try:
                    result = func(*args, **kwargs)
                except BaseException as exc:
                    _record_error(span, exc)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)

