"""Domain enumerations for the account service.

Enums represent fixed sets of domain values (e.g. failure categories).
"""

from enum import Enum


class FailureKind(str, Enum):
    """Category a failure is reported under at the transport boundary.

    Every domain exception carries exactly one kind; the presentation layer
    maps kinds to status codes and never inspects store-specific details.
    """

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INTERNAL = "internal"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid kind values as strings."""
        return [kind.value for kind in cls]
