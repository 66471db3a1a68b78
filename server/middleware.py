"""ASGI middleware that logs each request and tags it with a request id."""

import time
import uuid

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from common.logging_config import get_logger

logger = get_logger("server.request")


class RequestLoggingMiddleware:
    """
    Log request start and completion for every HTTP request.

    Implemented at the ASGI level rather than with ``BaseHTTPMiddleware`` so
    that streamed download bodies pass straight through to the server and the
    completion line is written after the last body byte, not after headers.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        method = scope["method"]
        path = scope["path"]
        status_code = None
        start_time = time.perf_counter()

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message).append("X-Request-ID", request_id)
            await send(message)

        logger.info(f"Request started: {method} {path} [request_id={request_id}]")

        try:
            await self.app(scope, receive, send_with_request_id)
        except Exception:
            duration = time.perf_counter() - start_time
            logger.error(
                f"Request aborted: {method} {path} status={status_code} "
                f"duration={duration:.3f}s [request_id={request_id}]"
            )
            raise

        duration = time.perf_counter() - start_time
        logger.info(
            f"Request completed: {method} {path} "
            f"status={status_code} duration={duration:.3f}s [request_id={request_id}]"
        )
