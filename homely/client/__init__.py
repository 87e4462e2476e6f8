"""Async HTTP client for the Homely API.

Usage:
    from homely.client import HomelyClient, TokenStore

    async with HomelyClient("http://localhost:8000") as client:
        await client.login("anna@example.com", "s3cret-pass")
        households = await client.my_households()
"""

from .http_client import AUTH_ENDPOINTS, HomelyClient
from .token_store import TokenStore

__all__ = [
    "AUTH_ENDPOINTS",
    "HomelyClient",
    "TokenStore",
]
