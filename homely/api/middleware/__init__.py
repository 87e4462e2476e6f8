"""HTTP middleware for authentication, request IDs and security headers."""

from .auth import AuthMiddleware, decode_access_token, is_exempt_path
from .request_id import RequestIDMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "AuthMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "decode_access_token",
    "is_exempt_path",
]
