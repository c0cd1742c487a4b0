"""Calendar Connect client.

Unified access to Google, Microsoft and Apple calendars with OAuth2
authorization and automatic token refresh.

Usage:
    from calendar_connect import ConnectClient

    client = ConnectClient(
        client_id="...",
        client_secret="...",
        redirect_uri="https://example.com/callback",
    )

    # Send the user here, then exchange the returned code
    url = client.auth.generate_auth_url(user_id="user-123")
    await client.auth.get_token(code)

    calendars = await client.calendars.list()
    events = await client.events.list(page_size=100)
"""

from calendar_connect.client import ConnectClient
from calendar_connect.config import ConnectConfig
from calendar_connect.exceptions import (
    AuthenticationError,
    ConnectError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)
from calendar_connect.models import ApiResponse, Credentials

__all__ = [
    "ConnectClient",
    "ConnectConfig",
    "Credentials",
    "ApiResponse",
    "ConnectError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    "NetworkError",
]
