"""Shared utilities: datetime."""

from accounts.shared.utils.datetime import ensure_utc, format_wire_timestamp, utc_now

__all__ = [
    "utc_now",
    "ensure_utc",
    "format_wire_timestamp",
]
