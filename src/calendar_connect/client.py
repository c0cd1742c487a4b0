"""Calendar Connect API client.

One client unifies Google Calendar, Microsoft Outlook and Apple iCloud
calendars behind the Calendar Connect API, with OAuth2 authorization and
automatic token refresh.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from calendar_connect.config import DEFAULT_TIMEOUT, ConnectConfig
from calendar_connect.credentials import CredentialStore, TokenCallback
from calendar_connect.http import RequestExecutor
from calendar_connect.models import ApiResponse, Credentials
from calendar_connect.refresh import RefreshCoordinator
from calendar_connect.resources import Auth, Calendars, Events

logger = logging.getLogger(__name__)


class ConnectClient:
    """Calendar Connect client with OAuth authentication.

    Each instance owns its credentials and refresh state; instances never
    share either.

    Example:
        >>> async with ConnectClient(
        ...     client_id="your-client-id",
        ...     client_secret="your-client-secret",
        ...     redirect_uri="https://example.com/callback",
        ... ) as client:
        ...     await client.auth.get_token(code)
        ...     calendars = await client.calendars.list()
        ...     events = await client.events.list(page_size=50)
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        credentials: Credentials | dict[str, Any] | None = None,
        on_tokens: TokenCallback | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            client_id: OAuth client ID. If None, reads CALENDAR_CONNECT_CLIENT_ID.
            client_secret: OAuth client secret. If None, reads CALENDAR_CONNECT_CLIENT_SECRET.
            redirect_uri: Registered redirect URI. If None, reads CALENDAR_CONNECT_REDIRECT_URI.
            base_url: API base URL. If None, reads CALENDAR_CONNECT_BASE_URL or uses the default.
            timeout: Request timeout in seconds.
            headers: Extra headers sent with every request.
            credentials: Tokens from a previous session.
            on_tokens: Called with the new Credentials whenever they change,
                including after an automatic refresh.
            transport: httpx transport override.

        Raises:
            ConnectError: If client_id, client_secret or redirect_uri is missing.
        """
        self.config = ConnectConfig.from_env(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            base_url=base_url,
            timeout=timeout,
            headers=headers,
        )
        self.credentials = CredentialStore(on_update=on_tokens)
        if credentials is not None:
            self.credentials.set(_as_credentials(credentials))

        self.executor = RequestExecutor(self.config, self.credentials, transport=transport)
        self.refresher = RefreshCoordinator(self.executor, self.credentials, self.config)

        self.auth = Auth(self)
        self.calendars = Calendars(self)
        self.events = Events(self)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def set_credentials(self, credentials: Credentials | dict[str, Any]) -> None:
        """Replace the stored tokens."""
        self.credentials.set(_as_credentials(credentials))

    def get_credentials(self) -> Credentials | None:
        """Get the stored tokens, if any."""
        return self.credentials.get()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        access_token: str | None = None,
    ) -> ApiResponse:
        """Make an authenticated API request.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            params: Query parameters.
            json: JSON body.
            access_token: Bearer token for this call only; the stored
                credentials are left untouched, and a 401 is raised as-is
                instead of refreshing them.

        Returns:
            ApiResponse with data, status and headers.

        Raises:
            ConnectError: The subclass matching the failure.
        """
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        return await self.refresher.execute(
            method,
            path,
            refreshable=headers is None,
            params=params,
            json=json,
            headers=headers,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.executor.aclose()

    async def __aenter__(self) -> ConnectClient:
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()


def _as_credentials(credentials: Credentials | dict[str, Any]) -> Credentials:
    if isinstance(credentials, Credentials):
        return credentials
    return Credentials.from_dict(credentials)
