"""
FastAPI middleware for request tracing and correlation.

Each request gets a UUID that is returned as ``X-Request-ID`` and bound into
structlog's contextvars, so every log line emitted while serving the
request carries it.
"""

from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assign a request ID to every HTTP request.

    An incoming ``X-Request-ID`` header is reused so a caller can correlate
    its own logs with ours; otherwise a new UUID is generated. The ID is
    stored in ``request.state.request_id``.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id, method=request.method, path=request.url.path
        )
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "method", "path")

        response.headers["X-Request-ID"] = request_id
        return response
