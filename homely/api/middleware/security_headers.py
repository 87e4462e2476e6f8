"""Security headers middleware for HTTP responses.

Adds X-Content-Type-Options, X-Frame-Options, X-XSS-Protection and
Referrer-Policy to every response. Strict-Transport-Security is added
only outside local and development environments.
"""

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from homely.core.config import get_settings

DEFAULT_HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to all HTTP responses.

    Attributes:
        content_type_options: X-Content-Type-Options header value
        frame_options: X-Frame-Options header value
        xss_protection: X-XSS-Protection header value
        referrer_policy: Referrer-Policy header value
        hsts: Strict-Transport-Security value, or None to omit the header
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        content_type_options: str = "nosniff",
        frame_options: str = "DENY",
        xss_protection: str = "1; mode=block",
        referrer_policy: str = "strict-origin-when-cross-origin",
        enable_hsts: bool | None = None,
    ):
        """Initialize security headers middleware.

        Args:
            app: FastAPI/Starlette application
            content_type_options: X-Content-Type-Options value (default: "nosniff")
            frame_options: X-Frame-Options value (default: "DENY")
            xss_protection: X-XSS-Protection value (default: "1; mode=block")
            referrer_policy: Referrer-Policy value (default: "strict-origin-when-cross-origin")
            enable_hsts: Force HSTS on or off. By default it is on unless the
                environment is local or development.
        """
        super().__init__(app)
        self.content_type_options = content_type_options
        self.frame_options = frame_options
        self.xss_protection = xss_protection
        self.referrer_policy = referrer_policy

        if enable_hsts is None:
            settings = get_settings()
            enable_hsts = not (settings.is_development or settings.is_local)
        self.hsts = DEFAULT_HSTS if enable_hsts else None

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = self.content_type_options
        response.headers["X-Frame-Options"] = self.frame_options
        response.headers["X-XSS-Protection"] = self.xss_protection
        response.headers["Referrer-Policy"] = self.referrer_policy
        if self.hsts:
            response.headers["Strict-Transport-Security"] = self.hsts

        return response
