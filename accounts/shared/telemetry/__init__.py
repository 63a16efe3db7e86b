"""Shared telemetry: logging setup and tracing helpers."""

from accounts.shared.telemetry.logging import (
    RequestIdFilter,
    resolve_log_level,
    setup_logging,
)
from accounts.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "setup_logging",
    "resolve_log_level",
    "RequestIdFilter",
    "traced",
    "add_span_attributes",
]
