"""Events across all connected providers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from calendar_connect.models import DeleteMode, Provider, check_mode, check_provider

if TYPE_CHECKING:
    from calendar_connect.client import ConnectClient

MAX_PAGE_SIZE = 1000


class Events:
    """Event listing and management.

    Event payloads use the API's camelCase keys (calendarId, allDay,
    recurringEventId, ...).

    Usage:
        # First page of October
        result = await client.events.list(
            page_size=50,
            start="2025-10-01T00:00:00Z",
            end="2025-10-31T23:59:59Z",
        )

        # Next page
        more = await client.events.list(page_size=50, paging=result["paging"])

        # Create a weekly event
        await client.events.create("google", {
            "calendarId": "primary",
            "title": "Gym Session",
            "start": "2025-11-10T18:00:00Z",
            "end": "2025-11-10T19:00:00Z",
            "recurrence": {"frequency": "WEEKLY", "byDay": ["MO", "WE"]},
        })
    """

    def __init__(self, client: ConnectClient):
        self._client = client

    async def list(
        self,
        page_size: int | None = None,
        start: str | None = None,
        end: str | None = None,
        calendar_ids: dict[str, list[str]] | None = None,
        paging: str | None = None,
        single_events: bool | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """List events, sorted by start time across providers.

        Args:
            page_size: Events per page (server default 250, capped at 1000).
            start: ISO date; only events starting from here.
            end: ISO date; only events ending before here.
            calendar_ids: Provider name to calendar IDs,
                e.g. {"google": ["personal@gmail.com"], "microsoft": [], "apple": []}.
            paging: Paging token from a previous response.
            single_events: True expands recurring events into instances,
                False returns series masters only.
            access_token: Bearer token for this call only.

        Returns:
            {"events": [...], "pageSize": int, "paging": str | None}
        """
        params: dict[str, str] = {}
        if page_size:
            params["pageSize"] = str(min(page_size, MAX_PAGE_SIZE))
        if start is not None:
            params["start"] = start
        if end is not None:
            params["end"] = end
        if calendar_ids is not None:
            params["calendarIds"] = json.dumps(calendar_ids, separators=(",", ":"))
        if paging:
            params["paging"] = paging
        if single_events is not None:
            params["singleEvents"] = "true" if single_events else "false"

        response = await self._client.request(
            "GET", "/events", params=params or None, access_token=access_token
        )
        return response.data

    async def create(
        self,
        provider: Provider,
        data: dict[str, Any],
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Create an event.

        Args:
            provider: "google", "microsoft" or "apple".
            data: Event fields. calendarId, title, start and end are required;
                description, allDay, location, recurrence, attendees, custom,
                availability, privacy and status are optional.
            access_token: Bearer token for this call only.

        Returns:
            {"success": True, "id": ..., "original": {...}, ...} or
            {"success": False, "message": "..."}.
        """
        check_provider(provider)
        response = await self._client.request(
            "POST", "/event", json={**data, "provider": provider}, access_token=access_token
        )
        return response.data

    async def update(
        self,
        provider: Provider,
        data: dict[str, Any],
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Update an event.

        Args:
            provider: "google", "microsoft" or "apple".
            data: calendarId and eventId plus the fields to change. For a
                recurring series set updateMode ("this", "following" or
                "all") and recurringEventId when editing an instance.
            access_token: Bearer token for this call only.

        Returns:
            Same shape as create().

        Raises:
            ValueError: If eventId is missing or updateMode is unknown.
        """
        check_provider(provider)
        if not data.get("eventId"):
            raise ValueError("eventId is required to update an event")
        check_mode(data.get("updateMode"), "updateMode")

        response = await self._client.request(
            "PUT", "/event", json={**data, "provider": provider}, access_token=access_token
        )
        return response.data

    async def delete(
        self,
        provider: Provider,
        calendar_id: str,
        event_id: str,
        recurring_event_id: str | None = None,
        delete_mode: DeleteMode | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Delete an event, or part of a recurring series.

        Returns:
            {"success": bool, "message": str | None}
        """
        check_provider(provider)
        check_mode(delete_mode, "deleteMode")

        body: dict[str, Any] = {
            "provider": provider,
            "calendarId": calendar_id,
            "eventId": event_id,
        }
        if recurring_event_id:
            body["recurringEventId"] = recurring_event_id
        if delete_mode:
            body["deleteMode"] = delete_mode

        response = await self._client.request(
            "DELETE", "/event", json=body, access_token=access_token
        )
        return response.data
