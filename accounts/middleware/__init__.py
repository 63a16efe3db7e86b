"""HTTP middleware: request timeout and request ID.

Applied in accounts.main; order matters (last added = outermost).
"""

from accounts.middleware.request_id import RequestIDMiddleware
from accounts.middleware.timeout import TimeoutMiddleware

__all__ = ["RequestIDMiddleware", "TimeoutMiddleware"]
