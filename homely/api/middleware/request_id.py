"""Middleware for request ID generation and propagation.

The request ID is taken from the ``X-Request-ID`` header or generated,
stored in the logging context and on ``request.state``, and echoed in the
response headers.
"""

import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from homely.core.logging import set_request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Generates an 8-character request ID when the client sends none."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        set_request_id(request_id)

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            set_request_id(None)
