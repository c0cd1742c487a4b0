"""Calendars across all connected providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from calendar_connect.client import ConnectClient


class Calendars:
    """Calendar listing.

    Example:
        >>> calendars = await client.calendars.list()
        >>> [c["title"] for c in calendars if c["provider"] == "google"]
    """

    def __init__(self, client: ConnectClient):
        self._client = client

    async def list(self, access_token: str | None = None) -> list[dict[str, Any]]:
        """List calendars from every connected provider (Google, Microsoft, Apple).

        Args:
            access_token: Bearer token for this call only.

        Returns:
            Unified calendar dicts with id, title, provider, timeZone, color,
            accessRole and the provider's original payload.
        """
        response = await self._client.request("GET", "/calendars", access_token=access_token)
        return response.data
