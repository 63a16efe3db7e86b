"""Request timeout middleware.

Cancels the request task once timeout_seconds have passed. Cancellation
unwinds through the repository, which rolls back any open transaction before
re-raising. A 504 is answered only while no response has started; a request
that times out mid-response gets its body closed instead. Raw ASGI.
"""

import asyncio
import json
import logging
from typing import Callable

from accounts.shared.context import get_request_id

logger = logging.getLogger(__name__)


def _timeout_body(timeout_seconds: float, request_id: str | None) -> bytes:
    return json.dumps(
        {
            "error": "GATEWAY_TIMEOUT",
            "message": f"Request timed out after {timeout_seconds} seconds",
            "details": {"timeout_seconds": timeout_seconds, "request_id": request_id},
        }
    ).encode()


def TimeoutMiddleware(app: Callable, timeout_seconds: float) -> Callable:
    """Cancel the request after timeout_seconds. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        response = {"started": False, "finished": False}

        async def tracking_send(message: dict) -> None:
            if message["type"] == "http.response.start":
                response["started"] = True
            elif message["type"] == "http.response.body" and not message.get("more_body"):
                response["finished"] = True
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, tracking_send), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            request_id = get_request_id()
            method, path = scope.get("method", ""), scope.get("path", "")
            if response["finished"]:
                return
            if response["started"]:
                logger.warning(
                    "Request %s %s timed out after %ss mid-response; closing body",
                    method,
                    path,
                    timeout_seconds,
                )
                await send({"type": "http.response.body", "body": b"", "more_body": False})
                return
            logger.warning(
                "Request %s %s timed out after %ss (request id %s)",
                method,
                path,
                timeout_seconds,
                request_id,
            )
            await send(
                {
                    "type": "http.response.start",
                    "status": 504,
                    "headers": [(b"content-type", b"application/json")],
                }
            )
            await send(
                {
                    "type": "http.response.body",
                    "body": _timeout_body(timeout_seconds, request_id),
                    "more_body": False,
                }
            )

    return asgi_app
