"""Logging configuration for the application."""

import logging
import sys

from accounts.core.config import Settings, get_settings
from accounts.shared.context import get_request_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"

_ENVIRONMENT_LEVELS = {
    "production": logging.INFO,
    "test": logging.WARNING,
    "development": logging.DEBUG,
}


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or '-') to every record as ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def resolve_log_level(settings: Settings) -> int:
    """Return the level for settings: explicit log_level, then debug, then environment."""
    if settings.log_level:
        level = logging.getLevelName(settings.log_level.upper())
        if isinstance(level, int):
            return level
    if settings.debug:
        return logging.DEBUG
    return _ENVIRONMENT_LEVELS.get(settings.environment, logging.INFO)


def setup_logging() -> None:
    """Configure application-wide logging.

    Level follows resolve_log_level (production INFO, test WARNING,
    development DEBUG). Output goes to stdout; each record carries the
    request id of the request that emitted it.
    """
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=resolve_log_level(settings),
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )

