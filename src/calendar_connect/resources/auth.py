"""OAuth flow and provider connection management."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from calendar_connect import oauth
from calendar_connect.models import Credentials, Provider, check_provider

if TYPE_CHECKING:
    from calendar_connect.client import ConnectClient


class Auth:
    """OAuth2 authorization and provider connections.

    Usage:
        # 1. Send the user to Calendar Connect
        url = client.auth.generate_auth_url(user_id="user-123", state="xyz")

        # 2. In the redirect handler
        credentials = await client.auth.get_token(code)

        # 3. See what the user connected
        status = await client.auth.get_connection_status()
        status["connections"]["google"]
    """

    def __init__(self, client: ConnectClient):
        self._client = client

    def generate_auth_url(
        self,
        user_id: str,
        state: str | None = None,
        scope: str | None = None,
    ) -> str:
        """Get the authorization URL to redirect the user to.

        Args:
            user_id: Your application's identifier for the user.
            state: Value echoed back to the redirect URI.
            scope: Requested scope.
        """
        return oauth.build_authorization_url(self._client.config, user_id, state, scope)

    async def get_token(self, code: str) -> Credentials:
        """Exchange an authorization code for tokens.

        The tokens are stored on the client, so later calls are
        authenticated and refreshed automatically.
        """
        return await oauth.exchange_code(
            self._client.executor, self._client.credentials, self._client.config, code
        )

    def set_credentials(self, credentials: Credentials | dict[str, Any]) -> None:
        """Replace the stored tokens."""
        self._client.set_credentials(credentials)

    async def get_connection_status(self, access_token: str | None = None) -> dict[str, Any]:
        """Get connected accounts per provider.

        Returns:
            {"connections": {"google": [...], "microsoft": [...], "apple": [...]},
             "limitReached": bool, "limit": int}
        """
        response = await self._client.request(
            "GET", "/oauth/connection-status", access_token=access_token
        )
        return response.data

    async def disconnect(
        self,
        provider: Provider,
        account: str | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Disconnect one account, or every account of a provider.

        Args:
            provider: "google", "microsoft" or "apple".
            account: Account ID (usually the email). None disconnects all.
            access_token: Bearer token for this call only.

        Returns:
            {"success": bool}
        """
        check_provider(provider)
        params = {"provider": provider}
        if account:
            params["account"] = account

        response = await self._client.request(
            "POST", "/oauth/disconnect", params=params, json={}, access_token=access_token
        )
        return response.data
