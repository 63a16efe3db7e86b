"""Shared utilities: request context, telemetry (logging/tracing), datetime helpers."""
